"""
Greeting of the setup screen (read from logo.txt).
"""
from config.settings import settings

LOGO_PATH = settings.assets_dir / "logo.txt"

def get_logo_text() -> str:
    """Returns the greeting text."""
    if LOGO_PATH.exists():
        with open(LOGO_PATH, 'r', encoding='utf-8') as f:
            return f.read().strip()
    return "🧪 MCA Aptitude & Code-Output Practice"
