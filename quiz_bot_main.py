#!/usr/bin/env python3
"""
quiz_bot_main.py — Aiogram 3.x aptitude & code-output quiz bot.
Question bank loaded once at startup × per-chat quiz × countdown. MemoryStorage. Graceful shutdown.
"""

import asyncio
import logging
import signal
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from config.settings import settings
from quizbank import QuestionBank
from quizbank.middlewares import ErrorHandlerMiddleware, ThrottlingMiddleware
from routers.quiz import quiz_router, stop_all_timers

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(settings.logs_dir / "bot.log", encoding="utf-8"),
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

bot: Bot | None = None
dp: Dispatcher | None = None

async def on_startup():
    logger.info("🚀 Bot is ready")

async def on_shutdown():
    logger.info("🛑 Shutting down")
    stop_all_timers()
    if bot:
        await bot.session.close()
    logger.info("👋 Bot stopped")

async def main():
    global bot, dp

    if not settings.api_token:
        logger.error("API_TOKEN is missing")
        sys.exit(1)

    # Exactly one read of the bank per run, a failure stays until restart
    question_bank = QuestionBank(settings.questions_source)
    await question_bank.load()
    if question_bank.ready:
        logger.info(f"Question bank: {len(question_bank.questions)} questions")
    else:
        logger.error(f"Question bank unavailable: {question_bank.error}")

    bot = Bot(token=settings.api_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher(storage=MemoryStorage(), question_bank=question_bank)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    # Middlewares before routers
    dp.message.middleware(ErrorHandlerMiddleware())
    dp.callback_query.middleware(ErrorHandlerMiddleware())
    dp.callback_query.middleware(ThrottlingMiddleware())

    dp.include_router(quiz_router)

    loop = asyncio.get_running_loop()
    def signal_handler(signum, frame):
        logger.info(f"Signal {signum}")
        if dp:
            loop.call_soon_threadsafe(lambda: asyncio.ensure_future(dp.stop_polling()))

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("Start polling...")
    try:
        await dp.start_polling(bot, handle_signals=False)
    except Exception as e:
        logger.error(f"Polling error: {e}", exc_info=True)

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    run()
