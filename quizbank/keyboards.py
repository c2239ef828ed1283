"""
Inline keyboards: setup, question, result.
"""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from config.settings import settings
from .models import QuizSession

OPTION_TEXT_LIMIT = 60

def get_setup_keyboard(session: QuizSession) -> InlineKeyboardMarkup:
    """Setup: pool size, time limit, code toggle, Start."""
    config = session.config
    builder = InlineKeyboardBuilder()
    builder.button(text=f"➖ {settings.pool_size_step}", callback_data="pool_dec")
    builder.button(text=f"🔢 {config.pool_size} questions", callback_data="noop")
    builder.button(text=f"➕ {settings.pool_size_step}", callback_data="pool_inc")
    builder.button(text=f"➖ {settings.time_limit_step}", callback_data="time_dec")
    builder.button(text=f"⏱ {config.time_limit_minutes} min", callback_data="noop")
    builder.button(text=f"➕ {settings.time_limit_step}", callback_data="time_inc")
    state = "✅" if config.include_code else "⬜"
    builder.button(text=f"{state} Include code-output questions", callback_data="code_toggle")
    builder.button(text="🚀 Start Quiz", callback_data="start")
    builder.adjust(3, 3, 1, 1)
    return builder.as_markup()

def get_question_keyboard(session: QuizSession) -> InlineKeyboardMarkup:
    """Question: options (selected one marked), Prev / Next or Submit, extras."""
    builder = InlineKeyboardBuilder()
    q = session.current_question
    if q is None:
        builder.button(text="🚪 Exit", callback_data="exit")
        return builder.as_markup()

    selected = session.answer_for(q)
    for i, opt in enumerate(q.options):
        state = "🔘" if selected == opt else "⚪"
        label = opt if len(opt) <= OPTION_TEXT_LIMIT else opt[:OPTION_TEXT_LIMIT - 1] + "…"
        builder.button(text=f"{state} {label}", callback_data=f"opt_{session.current_index}_{i}")
    builder.adjust(1)

    nav = [InlineKeyboardButton(text="⬅️ Prev", callback_data="prev")]
    if session.is_last:
        nav.append(InlineKeyboardButton(text="✅ Submit Quiz", callback_data="submit"))
    else:
        nav.append(InlineKeyboardButton(text="➡️ Next", callback_data="next"))
    builder.row(*nav)
    builder.row(
        InlineKeyboardButton(text="💡 Toggle Explanation", callback_data="explain"),
    )
    builder.row(
        InlineKeyboardButton(text="🧹 Clear Answers", callback_data="clear"),
        InlineKeyboardButton(text="🚪 Exit", callback_data="exit"),
    )
    return builder.as_markup()

def get_finish_keyboard() -> InlineKeyboardMarkup:
    """After the quiz: back, retake, report."""
    builder = InlineKeyboardBuilder()
    builder.button(text="🏠 Back", callback_data="back")
    builder.button(text="🔄 Retake", callback_data="retake")
    builder.button(text="📋 Copy Report", callback_data="report")
    builder.button(text="📄 PDF Report", callback_data="report_pdf")
    builder.adjust(2)
    return builder.as_markup()
