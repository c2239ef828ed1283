"""
Middlewares: Throttling (button flood), ErrorHandler.
For dp.callback_query.middleware(ThrottlingMiddleware()).
"""
import logging
import time
from typing import Any, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import CallbackQuery, Message

from config.settings import settings

logger = logging.getLogger(__name__)

class ThrottlingMiddleware(BaseMiddleware):
    """Drops updates of a user that come faster than `rate` seconds apart."""

    def __init__(self, rate: Optional[float] = None):
        self.rate = settings.throttle_rate if rate is None else rate
        self.last_seen: Dict[int, float] = {}

    async def __call__(
        self,
        handler,
        event: Message | CallbackQuery,
        data: Dict[str, Any]
    ) -> Any:
        user = getattr(event, "from_user", None)
        if user is None:
            return await handler(event, data)

        now = time.monotonic()
        last = self.last_seen.get(user.id)
        if last is not None and now - last < self.rate:
            logger.debug(f"Throttled {user.id}")
            if isinstance(event, CallbackQuery):
                await event.answer("⏳ Too fast")
            return None

        self.last_seen[user.id] = now
        # Cleanup old entries
        if len(self.last_seen) > 1000:
            cutoff = now - 60
            self.last_seen = {uid: t for uid, t in self.last_seen.items() if t > cutoff}
        return await handler(event, data)

class ErrorHandlerMiddleware(BaseMiddleware):
    """Catch handler errors, log, answer."""

    async def __call__(
        self,
        handler,
        event: Message | CallbackQuery,
        data: Dict[str, Any]
    ) -> Any:
        try:
            return await handler(event, data)
        except Exception as e:
            user = getattr(event, "from_user", None)
            logger.error(f"Handler error {user.id if user else '-'}: {e}", exc_info=True)
            if isinstance(event, CallbackQuery):
                try:
                    await event.answer("❌ Something went wrong")
                except TelegramBadRequest as answer_error:
                    # already answered or expired
                    logger.debug(f"Error reply skipped: {answer_error}")
            else:
                await event.answer("❌ Something went wrong. Try /start")
            return None
