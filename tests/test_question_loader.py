# tests/test_question_loader.py

import asyncio
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

import quizbank.question_loader as loader
from config.settings import settings
from quizbank.errors import LoadError
from quizbank.models import QuestionType
from quizbank.question_loader import (
    LoadStatus, QuestionBank, fetch_question_bank, load_question_bank, parse_question_bank,
    read_question_bank,
)

RECORDS = [
    {"id": "a1", "type": "aptitude", "topic": "Math", "question": "2+2?",
     "options": ["3", "4", "5"], "answer": "4", "difficulty": "easy"},
    {"id": 7, "type": "code", "topic": "Python", "code": "print(7)", "expected_output": 7},
]


def test_wrapped_and_bare_shapes_are_equal():
    wrapped = parse_question_bank({"questions": RECORDS})
    bare = parse_question_bank(RECORDS)

    assert wrapped == bare
    assert [q.id for q in bare] == ["a1", "7"]


def test_fields_are_normalized():
    a1, c7 = parse_question_bank(RECORDS)

    assert a1.type is QuestionType.APTITUDE
    assert a1.is_multiple_choice
    assert not hasattr(a1, "difficulty")
    assert c7.type is QuestionType.CODE
    assert c7.canonical_answer == "7"
    assert c7.prompt == "print(7)"
    assert c7.options == []


def test_order_is_preserved():
    records = [{"id": f"q{i}", "type": "aptitude"} for i in range(10)]

    assert [q.id for q in parse_question_bank(records)] == [f"q{i}" for i in range(10)]


@pytest.mark.parametrize("document", [{"items": RECORDS}, "text", 42, None, {"questions": {}}])
def test_document_without_sequence_fails(document):
    with pytest.raises(LoadError) as exc:
        parse_question_bank(document, "/srv/public/questions.json")

    assert "/srv/public/questions.json" in str(exc.value)


@pytest.mark.parametrize("entry", [{"type": "aptitude"}, {"id": "x"}, "a1", ["a1"]])
def test_entry_without_id_and_type_fails(entry):
    with pytest.raises(LoadError):
        parse_question_bank([RECORDS[0], entry])


def test_unknown_type_and_duplicates_are_skipped():
    records = RECORDS + [
        {"id": "e1", "type": "essay"},
        {"id": "a1", "type": "aptitude", "answer": "dup"},
    ]
    questions = parse_question_bank(records)

    assert [q.id for q in questions] == ["a1", "7"]
    assert questions[0].answer == "4"


def test_read_from_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps({"questions": RECORDS}), encoding="utf-8")

    assert len(read_question_bank(path)) == 2


def test_missing_file_names_expected_location(tmp_path):
    path = tmp_path / "public" / "questions.json"
    with pytest.raises(LoadError) as exc:
        read_question_bank(path)

    assert str(path) in str(exc.value)
    assert "expected at" in str(exc.value)


def test_invalid_json_fails(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(LoadError):
        read_question_bank(path)


def test_load_dispatches_to_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")

    questions = asyncio.run(load_question_bank(str(path)))
    assert [q.id for q in questions] == ["a1", "7"]


def test_bundled_sample_bank_loads():
    questions = read_question_bank(settings.public_dir / "questions.json")

    assert len(questions) == 8
    assert {q.type for q in questions} == {QuestionType.APTITUDE, QuestionType.CODE}
    assert all(q.canonical_answer is not None for q in questions)


def test_bank_reads_exactly_once(monkeypatch):
    calls = []

    async def fake_load(source):
        calls.append(source)
        return parse_question_bank(RECORDS)

    monkeypatch.setattr(loader, "load_question_bank", fake_load)
    bank = QuestionBank("memory://bank")

    async def scenario():
        await bank.load()
        await bank.load()

    asyncio.run(scenario())

    assert calls == ["memory://bank"]
    assert bank.status is LoadStatus.READY
    assert len(bank.questions) == 2


def test_bank_failure_is_terminal(tmp_path):
    bank = QuestionBank(str(tmp_path / "missing.json"))

    asyncio.run(bank.load())
    error = bank.error
    asyncio.run(bank.load())

    assert bank.status is LoadStatus.FAILED
    assert not bank.ready
    assert bank.error is error
    assert isinstance(error, LoadError)
    assert bank.questions == []


def fetch(response, call=fetch_question_bank):
    """Serves `response` at /questions.json on a local server and runs `call(url)` against it."""

    async def handler(request):
        return response

    async def scenario():
        app = web.Application()
        app.router.add_get("/questions.json", handler)
        server = TestServer(app)
        await server.start_server()
        url = str(server.make_url("/questions.json"))
        try:
            return url, await call(url)
        finally:
            await server.close()

    return asyncio.run(scenario())


def fetch_error(response):
    async def call(url):
        with pytest.raises(LoadError) as exc:
            await fetch_question_bank(url)
        return exc.value

    url, error = fetch(response, call)
    assert url in str(error)
    return error


def test_fetch_from_url_via_dispatch():
    url, questions = fetch(web.json_response({"questions": RECORDS}), load_question_bank)

    assert url.startswith("http://")
    assert [q.id for q in questions] == ["a1", "7"]


def test_fetch_non_ok_status_fails():
    error = fetch_error(web.Response(status=404, text="missing"))

    assert "HTTP 404" in str(error)


def test_fetch_invalid_json_fails():
    error = fetch_error(web.Response(text="{not json", content_type="application/json"))

    assert "not valid JSON" in str(error)


def test_fetch_invalid_encoding_fails():
    body = b'{"questions": [{"id": "\xff", "type": "aptitude"}]}'
    error = fetch_error(web.Response(body=body, content_type="application/json"))

    assert "not valid JSON" in str(error)


def test_fetch_unreachable_host_fails():
    async def scenario():
        server = TestServer(web.Application())
        await server.start_server()
        url = str(server.make_url("/questions.json"))
        await server.close()
        with pytest.raises(LoadError) as exc:
            await fetch_question_bank(url, timeout=5)
        return url, exc.value

    url, error = asyncio.run(scenario())

    assert "unreachable" in str(error)
    assert url in str(error)


def test_bank_with_undecodable_url_body_fails_cleanly():
    body = b'{"questions": [{"id": "\xff", "type": "aptitude"}]}'

    async def call(url):
        bank = QuestionBank(url)
        await bank.load()
        return bank

    _, bank = fetch(web.Response(body=body, content_type="application/json"), call)

    assert bank.status is LoadStatus.FAILED
    assert isinstance(bank.error, LoadError)
