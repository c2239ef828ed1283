"""
QuizController: the side-effecting driver around session.reduce.
Owns the preview pool, the current QuizSession and the countdown.
The countdown starts on every entry into `active` and stops on every exit.
"""
import logging
import random
from typing import Awaitable, Callable, List, Optional, Sequence

from .models import Phase, Question, QuizConfig, QuizSession, ReviewItem, Score
from .pool import select_pool
from .scoring import review, score
from .session import (
    Answer, Back, ClearAnswers, Configure, Exit, Navigate, Retake, Start, Submit,
    Tick, ToggleExplanation, reduce,
)
from .timers import CountdownTimer

logger = logging.getLogger(__name__)

TimeoutCallback = Callable[["QuizController"], Awaitable[None]]

class QuizController:
    """One quiz of one user."""

    def __init__(
        self,
        questions: Sequence[Question],
        config: Optional[QuizConfig] = None,
        rng: Optional[random.Random] = None,
        timer_factory: Callable = CountdownTimer,
        on_timeout: Optional[TimeoutCallback] = None,
    ):
        self.questions = list(questions)
        self.rng = rng or random.Random()
        self.timer_factory = timer_factory
        self.on_timeout = on_timeout
        self.timer = None
        self.session = QuizSession.initial(config)
        self.preview_pool: List[Question] = []
        self._refresh_preview()

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def config(self) -> QuizConfig:
        return self.session.config

    def _refresh_preview(self) -> None:
        self.preview_pool = select_pool(self.questions, self.session.config, self.rng)

    def dispatch(self, action) -> QuizSession:
        before = self.session
        self.session = reduce(before, action)
        if before.phase is not Phase.ACTIVE and self.session.phase is Phase.ACTIVE:
            self._start_timer()
        elif before.phase is Phase.ACTIVE and self.session.phase is not Phase.ACTIVE:
            self._stop_timer()
        return self.session

    def _start_timer(self) -> None:
        self._stop_timer()
        self.timer = self.timer_factory(self._on_tick)
        self.timer.start()

    def _stop_timer(self) -> None:
        if self.timer is not None:
            self.timer.stop()
            self.timer = None

    # Setup

    def configure(
        self,
        pool_size: Optional[int] = None,
        include_code: Optional[bool] = None,
        time_limit_minutes: Optional[int] = None,
    ) -> QuizConfig:
        before = self.session.config
        self.dispatch(Configure(pool_size, include_code, time_limit_minutes))
        after = self.session.config
        if (before.pool_size, before.include_code) != (after.pool_size, after.include_code):
            self._refresh_preview()
        return after

    def start(self) -> QuizSession:
        if self.phase is Phase.SETUP:
            self._refresh_preview()
        self.dispatch(Start(tuple(self.preview_pool)))
        logger.info(f"Quiz started: {len(self.session.pool)} questions, "
                    f"{self.session.config.time_limit_minutes} min")
        return self.session

    # Active

    def answer(self, value: str) -> QuizSession:
        return self.dispatch(Answer(value))

    def select_option(self, index: int, position: Optional[int] = None) -> QuizSession:
        """Answers with option `index`. A `position` other than the current one is stale and ignored."""
        question = self.session.current_question
        if position is not None and position != self.session.current_index:
            return self.session
        if question is None or not 0 <= index < len(question.options):
            return self.session
        return self.answer(question.options[index])

    def next(self) -> QuizSession:
        return self.dispatch(Navigate(1))

    def prev(self) -> QuizSession:
        return self.dispatch(Navigate(-1))

    def toggle_explanation(self) -> QuizSession:
        return self.dispatch(ToggleExplanation())

    def clear_answers(self) -> QuizSession:
        return self.dispatch(ClearAnswers())

    def submit(self) -> QuizSession:
        if self.dispatch(Submit()).phase is Phase.FINISHED:
            logger.info(f"Quiz submitted: {self.result()}")
        return self.session

    def tick(self) -> bool:
        """One countdown step. True when this tick ended the attempt."""
        was_active = self.session.phase is Phase.ACTIVE
        self.dispatch(Tick())
        timed_out = was_active and self.session.phase is Phase.FINISHED
        if timed_out:
            logger.warning(f"Quiz timeout: {self.result()}")
        return timed_out

    async def _on_tick(self) -> None:
        if self.tick() and self.on_timeout is not None:
            await self.on_timeout(self)

    # Finished

    def back(self) -> QuizSession:
        return self.dispatch(Back())

    def retake(self) -> QuizSession:
        if self.phase is Phase.FINISHED:
            self._refresh_preview()
        return self.dispatch(Retake(tuple(self.preview_pool)))

    def exit(self) -> QuizSession:
        return self.dispatch(Exit())

    def result(self) -> Score:
        return score(self.session.pool, self.session.answers)

    def review(self) -> List[ReviewItem]:
        return review(self.session.pool, self.session.answers)

    def close(self) -> None:
        """Stops the countdown without changing the session."""
        self._stop_timer()
