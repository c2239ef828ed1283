# tests/test_pool.py

import random
from collections import Counter

from quizbank.models import QuestionType, QuizConfig
from quizbank.pool import is_eligible, select_pool

from conftest import make_question


def test_pool_respects_size_and_type_rule(mixed_bank):
    rng = random.Random(7)
    for include_code in (True, False):
        for pool_size in (5, 6, 50, 200):
            config = QuizConfig(pool_size=pool_size, include_code=include_code)
            eligible = [q for q in mixed_bank if is_eligible(q, include_code)]
            pool = select_pool(mixed_bank, config, rng)

            assert len(pool) <= min(pool_size, len(eligible))
            assert len(pool) == min(pool_size, len(eligible))
            for q in pool:
                assert q.type is QuestionType.APTITUDE or include_code


def test_code_questions_excluded_even_when_pool_is_larger(mixed_bank):
    config = QuizConfig(pool_size=50, include_code=False)
    pool = select_pool(mixed_bank, config, random.Random(1))

    assert sorted(q.id for q in pool) == ["a1", "a2", "a3"]


def test_pool_truncates_to_pool_size():
    bank = [make_question(f"a{i}") for i in range(20)]
    pool = select_pool(bank, QuizConfig(pool_size=5), random.Random(3))

    assert len(pool) == 5
    assert len({q.id for q in pool}) == 5


def test_empty_bank_gives_empty_pool():
    assert select_pool([], QuizConfig(), random.Random(0)) == []


def test_only_code_questions_without_code_gives_empty_pool():
    bank = [make_question("c1", "code"), make_question("c2", "code")]
    assert select_pool(bank, QuizConfig(include_code=False), random.Random(0)) == []


def test_seeded_rng_is_deterministic(mixed_bank):
    config = QuizConfig(pool_size=5)
    first = select_pool(mixed_bank, config, random.Random(42))
    second = select_pool(mixed_bank, config, random.Random(42))

    assert [q.id for q in first] == [q.id for q in second]


def test_selection_does_not_mutate_input(mixed_bank):
    before = [q.id for q in mixed_bank]
    select_pool(mixed_bank, QuizConfig(pool_size=5), random.Random(5))

    assert [q.id for q in mixed_bank] == before


def test_shuffle_first_position_is_uniform():
    bank = [make_question(f"a{i}") for i in range(4)]
    config = QuizConfig(pool_size=5)
    rng = random.Random(1234)
    trials = 4000

    firsts = Counter(select_pool(bank, config, rng)[0].id for _ in range(trials))

    expected = trials / len(bank)
    assert set(firsts) == {q.id for q in bank}
    for qid, count in firsts.items():
        assert abs(count - expected) < 0.15 * expected, f"{qid} first {count} times"
