"""
Quiz router: setup screen, questions, result and review.
One QuizController per chat, kept in memory for the lifetime of the bot.
"""
import asyncio
import logging
from typing import Dict, Optional

from aiogram import Bot, F, Router, html
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import BufferedInputFile, CallbackQuery, InlineKeyboardMarkup, Message

from config.settings import settings
from quizbank import (
    ConfigurationError, LoadStatus, Phase, QuestionBank, QuizController,
)
from quizbank.keyboards import get_finish_keyboard, get_question_keyboard, get_setup_keyboard
from quizbank.report import render_report_pdf, render_report_text
from quizbank.views import (
    MESSAGE_LIMIT, render_error, render_finished, render_loading, render_question,
    render_review, render_setup,
)

logger = logging.getLogger(__name__)

quiz_router = Router()

QUIZ_SESSIONS: Dict[int, QuizController] = {}

def get_controller(bot: Bot, chat_id: int, question_bank: QuestionBank) -> QuizController:
    controller = QUIZ_SESSIONS.get(chat_id)
    if controller is None:
        async def on_timeout(ctrl: QuizController):
            try:
                await bot.send_message(chat_id, "⏰ <b>Time is up!</b>")
                await send_finished(bot, chat_id, ctrl)
            except Exception as e:
                logger.error(f"Timeout {chat_id}: {e}")

        controller = QuizController(question_bank.questions, on_timeout=on_timeout)
        QUIZ_SESSIONS[chat_id] = controller
        logger.info(f"New quiz for chat {chat_id}")
    return controller

def stop_all_timers() -> None:
    for controller in QUIZ_SESSIONS.values():
        controller.close()

def parse_number(args: Optional[str], name: str) -> int:
    try:
        return int((args or "").strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a whole number, e.g. /{name} 30") from None

def parse_option(data: str) -> tuple[int, int]:
    """opt_<question position>_<option index>"""
    _, position, index = data.split("_")
    return int(position), int(index)

def screen(controller: QuizController) -> tuple[str, InlineKeyboardMarkup]:
    """Text and keyboard of the current phase."""
    session = controller.session
    if session.phase is Phase.ACTIVE:
        return render_question(session), get_question_keyboard(session)
    if session.phase is Phase.FINISHED:
        return render_finished(controller.result()), get_finish_keyboard()
    return (
        render_setup(session, len(controller.questions), len(controller.preview_pool)),
        get_setup_keyboard(session),
    )

async def send_finished(bot: Bot, chat_id: int, controller: QuizController) -> None:
    await bot.send_message(chat_id, render_finished(controller.result()), reply_markup=get_finish_keyboard())
    for chunk in render_review(controller.review()):
        await bot.send_message(chat_id, chunk)

async def refresh(callback: CallbackQuery, controller: QuizController) -> None:
    text, markup = screen(controller)
    try:
        await callback.message.edit_text(text, reply_markup=markup)
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            raise

def bank_unavailable(question_bank: QuestionBank) -> Optional[str]:
    """Blocking loading/error screen, None when the bank is ready."""
    if question_bank.status is LoadStatus.FAILED:
        return render_error(question_bank.error)
    if not question_bank.ready:
        return render_loading()
    return None

@quiz_router.message(Command("start"))
async def cmd_start(message: Message, bot: Bot, question_bank: QuestionBank):
    blocked = bank_unavailable(question_bank)
    if blocked:
        return await message.answer(blocked)
    controller = get_controller(bot, message.chat.id, question_bank)
    text, markup = screen(controller)
    await message.answer(text, reply_markup=markup)

@quiz_router.message(Command("pool", "time"))
async def cmd_configure(message: Message, command: CommandObject, bot: Bot, question_bank: QuestionBank):
    blocked = bank_unavailable(question_bank)
    if blocked:
        return await message.answer(blocked)
    controller = get_controller(bot, message.chat.id, question_bank)
    if controller.phase is not Phase.SETUP:
        return await message.answer("❌ Exit the current quiz to change the settings.")
    try:
        value = parse_number(command.args, command.command)
    except ConfigurationError as e:
        return await message.answer(f"❌ {html.quote(str(e))}")
    if command.command == "pool":
        controller.configure(pool_size=value)
    else:
        controller.configure(time_limit_minutes=value)
    text, markup = screen(controller)
    await message.answer(text, reply_markup=markup)

@quiz_router.message(F.text & ~F.text.startswith("/"))
async def free_text_answer(message: Message, bot: Bot, question_bank: QuestionBank):
    if not question_bank.ready:
        return
    controller = QUIZ_SESSIONS.get(message.chat.id)
    if controller is None or controller.phase is not Phase.ACTIVE:
        return await message.answer("Press /start to begin a quiz.")
    question = controller.session.current_question
    if question is None or question.is_multiple_choice:
        return await message.answer("☝️ Pick one of the options above.")
    controller.answer(message.text)
    text, markup = screen(controller)
    await message.answer(text, reply_markup=markup)

SETUP_ACTIONS = {
    "pool_dec": lambda c: c.configure(pool_size=c.config.pool_size - settings.pool_size_step),
    "pool_inc": lambda c: c.configure(pool_size=c.config.pool_size + settings.pool_size_step),
    "time_dec": lambda c: c.configure(time_limit_minutes=c.config.time_limit_minutes - settings.time_limit_step),
    "time_inc": lambda c: c.configure(time_limit_minutes=c.config.time_limit_minutes + settings.time_limit_step),
    "code_toggle": lambda c: c.configure(include_code=not c.config.include_code),
    "start": lambda c: c.start(),
}

QUIZ_ACTIONS = {
    "prev": lambda c: c.prev(),
    "next": lambda c: c.next(),
    "explain": lambda c: c.toggle_explanation(),
    "clear": lambda c: c.clear_answers(),
    "exit": lambda c: c.exit(),
    "back": lambda c: c.back(),
    "retake": lambda c: c.retake(),
}

@quiz_router.callback_query(F.data == "noop")
async def noop(callback: CallbackQuery):
    await callback.answer()

@quiz_router.callback_query(F.data.in_(SETUP_ACTIONS.keys() | QUIZ_ACTIONS.keys()))
async def quiz_action(callback: CallbackQuery, bot: Bot, question_bank: QuestionBank):
    blocked = bank_unavailable(question_bank)
    if blocked:
        return await callback.answer("❌ Question bank unavailable. Send /start", show_alert=True)
    controller = get_controller(bot, callback.message.chat.id, question_bank)
    action = SETUP_ACTIONS.get(callback.data) or QUIZ_ACTIONS[callback.data]
    action(controller)
    await refresh(callback, controller)
    await callback.answer()

@quiz_router.callback_query(F.data.startswith("opt_"))
async def pick_option(callback: CallbackQuery):
    controller = QUIZ_SESSIONS.get(callback.message.chat.id)
    if controller is None or controller.phase is not Phase.ACTIVE:
        return await callback.answer("❌ No active quiz")
    try:
        position, index = parse_option(callback.data)
    except ValueError:
        return await callback.answer()
    if position != controller.session.current_index:
        return await callback.answer("⚠️ This question is no longer shown, use the latest message")
    controller.select_option(index, position)
    await refresh(callback, controller)
    await callback.answer()

@quiz_router.callback_query(F.data == "submit")
async def submit_quiz(callback: CallbackQuery, bot: Bot):
    controller = QUIZ_SESSIONS.get(callback.message.chat.id)
    if controller is None or controller.phase is not Phase.ACTIVE:
        return await callback.answer("❌ No active quiz")
    controller.submit()
    await refresh(callback, controller)
    for chunk in render_review(controller.review()):
        await bot.send_message(callback.message.chat.id, chunk)
    await callback.answer()

@quiz_router.callback_query(F.data.in_({"report", "report_pdf"}))
async def export_report(callback: CallbackQuery):
    controller = QUIZ_SESSIONS.get(callback.message.chat.id)
    if controller is None or controller.phase is not Phase.FINISHED:
        return await callback.answer("❌ No finished quiz")
    session = controller.session
    if callback.data == "report":
        text = render_report_text(session)
        if len(text) < MESSAGE_LIMIT:
            await callback.message.answer(html.pre(html.quote(text)))
        else:
            await callback.message.answer_document(
                BufferedInputFile(text.encode("utf-8"), filename="quiz_report.json")
            )
    else:
        pdf = await asyncio.to_thread(render_report_pdf, session)
        await callback.message.answer_document(BufferedInputFile(pdf, filename="quiz_report.pdf"))
    await callback.answer()
