"""
Message texts for every screen (HTML parse mode).
Pure functions of the quiz state, keyboards live in keyboards.py.
"""
from typing import List, Sequence

from aiogram import html

from assets.logo import get_logo_text
from .errors import LoadError
from .models import QuestionType, QuizSession, ReviewItem, Score
from .timers import format_remaining

# Telegram refuses messages longer than 4096 characters
MESSAGE_LIMIT = 4000

def render_loading() -> str:
    return "⏳ Loading questions..."

def render_error(error: LoadError) -> str:
    return f"❌ <b>Error:</b> {html.quote(str(error))}"

def render_setup(session: QuizSession, bank_size: int, pool_size: int) -> str:
    config = session.config
    code = "✅ included" if config.include_code else "⬜ excluded"
    return (
        f"{html.quote(get_logo_text())}\n\n"
        f"🔢 Number of questions: <b>{config.pool_size}</b>\n"
        f"⏱ Time limit: <b>{config.time_limit_minutes}</b> min\n"
        f"💻 Code-output questions: {code}\n\n"
        f"📚 Total questions in bank: <b>{bank_size}</b>\n"
        f"🎯 Selected pool size for quiz: <b>{pool_size}</b>\n\n"
        f"Use the buttons, or /pool N and /time N for exact values."
    )

def render_question(session: QuizSession) -> str:
    q = session.current_question
    timer = f"⏰ Time left: <b>{format_remaining(session.remaining_seconds)}</b>"
    if q is None:
        return f"{timer}\n\n❌ No questions match the current settings. Exit and change them."

    lines = [
        timer,
        "",
        f"<b>Question {session.current_index + 1} of {len(session.pool)}</b> — "
        f"Topic: {html.quote(q.topic or '-')}",
        "",
    ]
    if q.type is QuestionType.CODE:
        lines.append("<i>Code (predict output)</i>")
        lines.append(html.pre(html.quote(q.prompt)))
    else:
        lines.append(html.quote(q.prompt))

    current = session.answer_for(q)
    if not q.is_multiple_choice:
        lines.append("")
        lines.append("✍️ Type your answer as a message.")
    if current is not None:
        lines.append(f"Your answer: <b>{html.quote(current)}</b>")

    if session.show_explanation:
        lines.append("")
        lines.append(f"<b>Explanation:</b> {html.quote(q.explanation or '—')}")
        if q.type is QuestionType.CODE and q.expected_output:
            lines.append("<b>Expected output:</b>")
            lines.append(html.pre(html.quote(q.expected_output)))

    lines.append("")
    lines.append(f"Answered: {session.answered_count}")
    return "\n".join(lines)

def render_finished(result: Score) -> str:
    return (
        f"✅ <b>Quiz result</b>\n\n"
        f"Total: {result.total}  Correct: {result.correct}  "
        f"Wrong: {result.wrong}  Skipped: {result.skipped}\n"
        f"Score: {result.percentage:.1f}%"
    )

def _clip(text: str, size: int) -> str:
    """Escaped text of at most `size` characters, cut before escaping so no entity or tag is split."""
    quoted = html.quote(text)
    if len(quoted) <= size:
        return quoted
    cut = size - 1
    while cut > 0 and len(html.quote(text[:cut])) > size - 1:
        cut -= len(html.quote(text[:cut])) - (size - 1)
    return html.quote(text[:max(cut, 0)]) + "…"

def render_review_item(item: ReviewItem, limit: int = MESSAGE_LIMIT) -> str:
    # fixed markup takes under 100 characters, free text shares the rest
    room = max(limit - 100, 40)
    q = item.question
    prompt = _clip(q.prompt, room * 45 // 100)
    if q.type is QuestionType.CODE:
        prompt = html.pre(prompt)
    mark = "✅ Correct" if item.is_correct else "❌ Wrong"
    return (
        f"{item.position}. {_clip(q.topic or '-', room // 20)} — <b>{_clip(q.id, room // 20)}</b>\n"
        f"{prompt}\n"
        f"Your answer: <b>{_clip(item.submitted or '-', room // 10)}</b> — "
        f"Correct: <b>{_clip(item.canonical or '', room // 10)}</b> — {mark}\n"
        f"Explanation: {_clip(q.explanation or '—', room // 4)}"
    )

def render_review(items: Sequence[ReviewItem], limit: int = MESSAGE_LIMIT) -> List[str]:
    """Review split into messages that fit the Telegram limit."""
    chunks: List[str] = []
    current = "<b>Review</b>"
    for item in items:
        block = render_review_item(item, limit)
        if len(current) + len(block) + 2 > limit:
            chunks.append(current)
            current = block
        else:
            current = f"{current}\n\n{block}"
    chunks.append(current)
    return chunks
