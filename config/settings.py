"""
Bot configuration: paths, quiz bounds, timings, token from the environment.
Pydantic v2 settings, every field overridable through an env variable.
"""
from pathlib import Path

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Bot settings."""
    api_token: str = ""  # API_TOKEN

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    public_dir: Path = base_dir / "public"
    assets_dir: Path = base_dir / "assets"
    logs_dir: Path = base_dir / "logs"

    # Question bank: a file path or an http(s) URL, read once per run
    questions_source: str = str(public_dir / "questions.json")

    # Number of questions per attempt
    default_pool_size: int = 30
    min_pool_size: int = 5
    max_pool_size: int = 200
    pool_size_step: int = 5

    # Time limit per attempt (minutes)
    default_time_limit: int = 30
    min_time_limit: int = 5
    max_time_limit: int = 240
    time_limit_step: int = 5

    default_include_code: bool = True

    # Countdown granularity (seconds)
    tick_interval: float = 1.0

    # Minimum pause between button taps of one user (seconds)
    throttle_rate: float = 0.3

    log_level: str = "INFO"

    model_config = {"case_sensitive": False}

settings = Settings()
settings.logs_dir.mkdir(parents=True, exist_ok=True)
