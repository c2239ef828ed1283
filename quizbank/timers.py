"""
Countdown for an active attempt.
One asyncio task per attempt calls on_tick once per interval until stopped.
format_remaining() -> "MM : SS" for the question screen.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from config.settings import settings

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]

class CountdownTimer:
    """Ticking task. stop() guarantees that no further tick is delivered."""

    def __init__(self, on_tick: TickCallback, interval: Optional[float] = None):
        self.on_tick = on_tick
        self.interval = settings.tick_interval if interval is None else interval
        self.task: Optional[asyncio.Task] = None
        self._stopped = True

    @property
    def running(self) -> bool:
        return not self._stopped

    def start(self) -> None:
        """Starts ticking. A second start while running is ignored."""
        if self.running:
            logger.debug("Timer already running")
            return
        self._stopped = False
        self.task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Timer start: tick every {self.interval}s")

    async def _run(self) -> None:
        while not self._stopped:
            await asyncio.sleep(self.interval)
            if self._stopped:
                break
            await self.on_tick()

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        task, self.task = self.task, None
        # a tick that stops its own timer finishes its callback first
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        logger.info("Timer stopped")

def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None

def format_remaining(seconds: Optional[int]) -> str:
    """'MM : SS', or '--:--' when no countdown is active."""
    if seconds is None:
        return "--:--"
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d} : {secs:02d}"
