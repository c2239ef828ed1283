"""
Exporting the result of a finished attempt.
Text report: score + answers as JSON.
PDF report: score summary and per-question review, rendered with ReportLab.
"""
import json
import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Dict
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Paragraph, Preformatted, SimpleDocTemplate, Spacer

from .models import QuestionType, QuizSession
from .scoring import review, score

logger = logging.getLogger(__name__)

DEJAVU_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"

def build_report(session: QuizSession) -> Dict[str, Any]:
    """{"score": {...}, "answers": {question id: answer}}"""
    return {
        "score": score(session.pool, session.answers).model_dump(),
        "answers": dict(session.answers),
    }

def render_report_text(session: QuizSession) -> str:
    return json.dumps(build_report(session), indent=2, ensure_ascii=False)

def _font_name() -> str:
    # DejaVu covers non-Latin answers, Helvetica otherwise
    if "DejaVuSans" in pdfmetrics.getRegisteredFontNames():
        return "DejaVuSans"
    try:
        pdfmetrics.registerFont(TTFont("DejaVuSans", DEJAVU_PATH))
    except (TTFError, OSError):
        return "Helvetica"
    # <b> in paragraphs needs a bold face of the family
    pdfmetrics.registerFontFamily(
        "DejaVuSans", normal="DejaVuSans", bold="DejaVuSans", italic="DejaVuSans", boldItalic="DejaVuSans"
    )
    return "DejaVuSans"

def render_report_pdf(session: QuizSession) -> bytes:
    """
    Renders the PDF report.

    Returns:
        PDF document bytes, ready to send as a file.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title="Quiz report")
    styles = getSampleStyleSheet()
    font_name = _font_name()

    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Title"],
        textColor=colors.darkblue,
        spaceAfter=20,
        alignment=1,
    )
    body = ParagraphStyle("ReportBody", parent=styles["Normal"], fontName=font_name)
    code = ParagraphStyle("ReportCode", parent=styles["Code"], backColor=colors.whitesmoke)

    result = score(session.pool, session.answers)
    story = [
        Paragraph("Quiz report", title_style),
        Paragraph(f"Date: {datetime.now().strftime('%d.%m.%Y %H:%M')}", body),
        Paragraph(
            f"Total: {result.total} &nbsp; Correct: {result.correct} &nbsp; "
            f"Wrong: {result.wrong} &nbsp; Skipped: {result.skipped} &nbsp; "
            f"({result.percentage:.1f}%)",
            body,
        ),
        Spacer(1, 0.8 * cm),
    ]

    for item in review(session.pool, session.answers):
        q = item.question
        mark = '<font color="green">Correct</font>' if item.is_correct else '<font color="red">Wrong</font>'
        story.append(Paragraph(f"<b>{item.position}. {escape(q.topic)}</b> ({escape(q.id)})", body))
        if q.type is QuestionType.CODE:
            story.append(Preformatted(q.prompt, code))
        else:
            story.append(Paragraph(escape(q.prompt), body))
        story.append(Paragraph(
            f"Your answer: <b>{escape(item.submitted or '-')}</b> &nbsp; "
            f"Correct: <b>{escape(item.canonical or '-')}</b> &nbsp; {mark}",
            body,
        ))
        story.append(Paragraph(f"Explanation: {escape(q.explanation or '-')}", body))
        story.append(Spacer(1, 0.4 * cm))

    doc.build(story)
    logger.info(f"PDF report rendered: {len(session.pool)} questions")
    return buffer.getvalue()
