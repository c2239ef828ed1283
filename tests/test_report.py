# tests/test_report.py

import json

from quizbank.models import QuizConfig, QuizSession
from quizbank.report import build_report, render_report_pdf, render_report_text
from quizbank.session import Answer, Start, Submit, reduce


def _finished(pool, *answers):
    s = reduce(QuizSession.initial(QuizConfig()), Start(tuple(pool)))
    for value in answers:
        s = reduce(s, Answer(value))
    return reduce(s, Submit())


def test_build_report_has_score_and_answers(mixed_bank):
    session = _finished(mixed_bank, "4")
    report = build_report(session)

    assert report["score"] == {"total": 5, "correct": 1, "wrong": 0, "skipped": 4}
    assert report["answers"] == {"a1": "4"}


def test_text_report_is_json(mixed_bank):
    session = _finished(mixed_bank, "3")

    assert json.loads(render_report_text(session)) == build_report(session)


def test_pdf_report_renders(mixed_bank):
    session = _finished(mixed_bank, "4 < 5 & more")
    pdf = render_report_pdf(session)

    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 500


def test_pdf_report_for_empty_pool():
    assert render_report_pdf(_finished([])).startswith(b"%PDF")
