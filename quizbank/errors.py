"""
Quiz errors: loading the bank and invalid configuration.
"""


class QuizError(Exception):
    """Base class for quiz errors."""


class LoadError(QuizError):
    """The question bank could not be fetched or parsed."""

    def __init__(self, detail: str, source: str):
        self.detail = detail
        self.source = source
        super().__init__(f"{detail}. The question bank is expected at {source}")


class ConfigurationError(QuizError):
    """Pool size or time limit outside the supported bounds."""
