"""
quizbank: question bank, pool selection, session state machine, scoring.
Keyboards, views and reports are imported from their modules (they need aiogram / reportlab).
"""
import logging

logger = logging.getLogger(__name__)

from .errors import QuizError, LoadError, ConfigurationError
from .models import (
    Question, QuestionType, Phase, QuizConfig, QuizSession, Score, ReviewItem
)
from .question_loader import (
    QuestionBank, LoadStatus, load_question_bank, parse_question_bank, read_question_bank
)
from .pool import select_pool, is_eligible
from .scoring import score, review, is_correct
from .session import reduce
from .timers import CountdownTimer, format_remaining
from .controller import QuizController

__all__ = [
    "QuizError", "LoadError", "ConfigurationError",
    "Question", "QuestionType", "Phase", "QuizConfig", "QuizSession", "Score", "ReviewItem",
    "QuestionBank", "LoadStatus", "load_question_bank", "parse_question_bank", "read_question_bank",
    "select_pool", "is_eligible",
    "score", "review", "is_correct",
    "reduce",
    "CountdownTimer", "format_remaining",
    "QuizController",
]
