"""
Quiz session state machine: setup -> active -> finished.
reduce(session, action) returns a new QuizSession and never mutates its input.
Transitions outside their phase are no-ops.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple, Type

from .models import Phase, Question, QuizConfig, QuizSession

@dataclass(frozen=True)
class Configure:
    pool_size: Optional[int] = None
    include_code: Optional[bool] = None
    time_limit_minutes: Optional[int] = None

@dataclass(frozen=True)
class Start:
    pool: Tuple[Question, ...]

@dataclass(frozen=True)
class Answer:
    value: str

@dataclass(frozen=True)
class Navigate:
    step: int

@dataclass(frozen=True)
class ToggleExplanation:
    pass

@dataclass(frozen=True)
class ClearAnswers:
    pass

@dataclass(frozen=True)
class Submit:
    pass

@dataclass(frozen=True)
class Tick:
    pass

@dataclass(frozen=True)
class Back:
    pass

@dataclass(frozen=True)
class Retake:
    pool: Tuple[Question, ...]

@dataclass(frozen=True)
class Exit:
    pass

def _configure(session: QuizSession, action: Configure) -> QuizSession:
    if session.phase is not Phase.SETUP:
        return session
    config = QuizConfig.clamped(
        pool_size=action.pool_size,
        include_code=action.include_code,
        time_limit_minutes=action.time_limit_minutes,
        base=session.config,
    )
    return session.model_copy(update={"config": config})

def _begin(session: QuizSession, pool: Sequence[Question]) -> QuizSession:
    return session.model_copy(update={
        "phase": Phase.ACTIVE,
        "pool": tuple(pool),
        "current_index": 0,
        "answers": {},
        "remaining_seconds": session.config.time_limit_minutes * 60,
        "show_explanation": False,
    })

def _start(session: QuizSession, action: Start) -> QuizSession:
    if session.phase is not Phase.SETUP:
        return session
    return _begin(session, action.pool)

def _retake(session: QuizSession, action: Retake) -> QuizSession:
    if session.phase is not Phase.FINISHED:
        return session
    return _begin(session, action.pool)

def _answer(session: QuizSession, action: Answer) -> QuizSession:
    question = session.current_question
    if session.phase is not Phase.ACTIVE or question is None:
        return session
    answers = dict(session.answers)
    if action.value is None or not str(action.value).strip():
        # blank free-text input means "no answer"
        answers.pop(question.id, None)
    else:
        answers[question.id] = str(action.value)
    return session.model_copy(update={"answers": answers})

def _navigate(session: QuizSession, action: Navigate) -> QuizSession:
    if session.phase is not Phase.ACTIVE:
        return session
    index = session.current_index + action.step
    if index < 0 or index >= len(session.pool):
        return session
    return session.model_copy(update={"current_index": index})

def _toggle_explanation(session: QuizSession, action: ToggleExplanation) -> QuizSession:
    if session.phase is not Phase.ACTIVE:
        return session
    return session.model_copy(update={"show_explanation": not session.show_explanation})

def _clear_answers(session: QuizSession, action: ClearAnswers) -> QuizSession:
    if session.phase is not Phase.ACTIVE:
        return session
    return session.model_copy(update={"answers": {}, "current_index": 0})

def _finish(session: QuizSession) -> QuizSession:
    return session.model_copy(update={"phase": Phase.FINISHED, "show_explanation": True})

def _submit(session: QuizSession, action: Submit) -> QuizSession:
    if session.phase is not Phase.ACTIVE:
        return session
    return _finish(session)

def _tick(session: QuizSession, action: Tick) -> QuizSession:
    if session.phase is not Phase.ACTIVE or session.remaining_seconds is None:
        return session
    remaining = max(0, session.remaining_seconds - 1)
    session = session.model_copy(update={"remaining_seconds": remaining})
    if remaining == 0:
        return _finish(session)
    return session

def _to_setup(session: QuizSession) -> QuizSession:
    return QuizSession.initial(session.config)

def _back(session: QuizSession, action: Back) -> QuizSession:
    if session.phase is not Phase.FINISHED:
        return session
    return _to_setup(session)

def _exit(session: QuizSession, action: Exit) -> QuizSession:
    if session.phase is Phase.SETUP:
        return session
    return _to_setup(session)

_HANDLERS: Dict[Type, Callable] = {
    Configure: _configure,
    Start: _start,
    Answer: _answer,
    Navigate: _navigate,
    ToggleExplanation: _toggle_explanation,
    ClearAnswers: _clear_answers,
    Submit: _submit,
    Tick: _tick,
    Back: _back,
    Retake: _retake,
    Exit: _exit,
}

def reduce(session: QuizSession, action) -> QuizSession:
    """Applies one action to the session."""
    try:
        handler = _HANDLERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown quiz action: {action!r}") from None
    return handler(session, action)
