# tests/conftest.py

import pytest

from quizbank.models import Question


def make_question(qid, qtype="aptitude", **fields):
    data = {"id": qid, "type": qtype, "topic": "General"}
    if qtype == "code":
        data["code"] = f"print({qid!r})"
    else:
        data["question"] = f"Question {qid}?"
    data.update(fields)
    return Question.model_validate(data)


@pytest.fixture
def single_bank():
    return [make_question("a1", answer="4", options=["3", "4", "5"])]


@pytest.fixture
def mixed_bank():
    return [
        make_question("a1", answer="4", options=["3", "4", "5"]),
        make_question("a2", answer="10", options=["8", "10"]),
        make_question("a3", answer="blue"),
        make_question("c1", "code", expected_output="[1, 2, 3]"),
        make_question("c2", "code", expected_output="53", options=["8", "53"]),
    ]


class FakeTimer:
    """Timer double: records start/stop, ticks are driven by the test."""

    def __init__(self, on_tick):
        self.on_tick = on_tick
        self.starts = 0
        self.stops = 0

    def start(self):
        self.starts += 1

    def stop(self):
        self.stops += 1


@pytest.fixture
def timers():
    created = []

    def factory(on_tick):
        timer = FakeTimer(on_tick)
        created.append(timer)
        return timer

    factory.created = created
    return factory
