"""
Quiz models: Pydantic v2.
Question: one record of the bank (aptitude or code-output).
QuizConfig: attempt settings, bounded by config.settings.
QuizSession: immutable state of one attempt, replaced by the reducer.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.settings import settings
from .errors import ConfigurationError

class QuestionType(str, Enum):
    APTITUDE = "aptitude"
    CODE = "code"

class Phase(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    FINISHED = "finished"

class Question(BaseModel):
    """Question of the bank."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    type: QuestionType
    topic: str = ""
    question: Optional[str] = None
    code: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    answer: Optional[str] = None
    expected_output: Optional[str] = None
    explanation: Optional[str] = None

    @field_validator("id", "answer", "expected_output", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> Any:
        # JSON banks often carry numeric ids and answers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("options", mode="before")
    @classmethod
    def options_as_text(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(opt) for opt in v]
        return v

    @field_validator("topic", mode="before")
    @classmethod
    def topic_or_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def prompt(self) -> str:
        """Code snippet for code questions, prose otherwise."""
        if self.type is QuestionType.CODE:
            return self.code or self.question or ""
        return self.question or self.code or ""

    @property
    def canonical_answer(self) -> Optional[str]:
        """`answer` first, then `expected_output`; empty strings count as absent."""
        if self.answer:
            return self.answer
        if self.expected_output:
            return self.expected_output
        return None

    @property
    def is_multiple_choice(self) -> bool:
        return bool(self.options)

class QuizConfig(BaseModel):
    """Attempt settings chosen on the setup screen."""
    model_config = ConfigDict(frozen=True)

    pool_size: int = settings.default_pool_size
    include_code: bool = settings.default_include_code
    time_limit_minutes: int = settings.default_time_limit

    @model_validator(mode="after")
    def check_bounds(self) -> "QuizConfig":
        if not settings.min_pool_size <= self.pool_size <= settings.max_pool_size:
            raise ConfigurationError(
                f"pool size must be within {settings.min_pool_size}..{settings.max_pool_size}, "
                f"got {self.pool_size}"
            )
        if not settings.min_time_limit <= self.time_limit_minutes <= settings.max_time_limit:
            raise ConfigurationError(
                f"time limit must be within {settings.min_time_limit}..{settings.max_time_limit} "
                f"minutes, got {self.time_limit_minutes}"
            )
        return self

    @classmethod
    def clamped(
        cls,
        pool_size: Optional[int] = None,
        include_code: Optional[bool] = None,
        time_limit_minutes: Optional[int] = None,
        base: Optional["QuizConfig"] = None,
    ) -> "QuizConfig":
        """Build a config from raw input, pulling numbers into the supported bounds."""
        base = base or cls()
        if pool_size is None:
            pool_size = base.pool_size
        if include_code is None:
            include_code = base.include_code
        if time_limit_minutes is None:
            time_limit_minutes = base.time_limit_minutes
        return cls(
            pool_size=_clamp(pool_size, settings.min_pool_size, settings.max_pool_size),
            include_code=include_code,
            time_limit_minutes=_clamp(
                time_limit_minutes, settings.min_time_limit, settings.max_time_limit
            ),
        )

def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))

class Score(BaseModel):
    """Aggregate counts of one attempt."""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    correct: int = 0
    wrong: int = 0
    skipped: int = 0

    @property
    def percentage(self) -> float:
        if not self.total:
            return 0.0
        return round(self.correct / self.total * 100, 1)

class ReviewItem(BaseModel):
    """One line of the post-attempt review."""
    model_config = ConfigDict(frozen=True)

    position: int
    question: Question
    submitted: Optional[str] = None
    canonical: Optional[str] = None
    is_correct: bool = False

class QuizSession(BaseModel):
    """State of one attempt. Never mutated in place, see session.reduce."""
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.SETUP
    config: QuizConfig = Field(default_factory=QuizConfig)
    pool: Tuple[Question, ...] = ()
    current_index: int = 0
    answers: Dict[str, str] = Field(default_factory=dict)
    remaining_seconds: Optional[int] = None
    show_explanation: bool = False

    @classmethod
    def initial(cls, config: Optional[QuizConfig] = None) -> "QuizSession":
        return cls(config=config or QuizConfig())

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_index < len(self.pool):
            return self.pool[self.current_index]
        return None

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.pool) - 1

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    def answer_for(self, question: Question) -> Optional[str]:
        return self.answers.get(question.id)
