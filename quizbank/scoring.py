"""
Scoring and review of an attempt.
One definition of "correct" shared by the score, the review and the report.
"""
from typing import List, Mapping, Optional, Sequence

from .models import Question, ReviewItem, Score

def is_correct(question: Question, submitted: Optional[str]) -> bool:
    """Trimmed, case-sensitive equality with the canonical answer."""
    canonical = question.canonical_answer
    if submitted is None or canonical is None:
        return False
    return str(submitted).strip() == str(canonical).strip()

def score(pool: Sequence[Question], answers: Mapping[str, str]) -> Score:
    """
    Counts correct, wrong and skipped answers.

    Args:
        pool: frozen pool of the attempt
        answers: question id -> submitted answer

    Returns:
        Score with total == len(pool)
    """
    correct = wrong = skipped = 0
    for question in pool:
        submitted = answers.get(question.id)
        if submitted is None:
            skipped += 1
        elif is_correct(question, submitted):
            correct += 1
        else:
            wrong += 1
    return Score(total=len(pool), correct=correct, wrong=wrong, skipped=skipped)

def review(pool: Sequence[Question], answers: Mapping[str, str]) -> List[ReviewItem]:
    """Per-question review lines in pool order."""
    items = []
    for position, question in enumerate(pool, 1):
        submitted = answers.get(question.id)
        items.append(ReviewItem(
            position=position,
            question=question,
            submitted=submitted,
            canonical=question.canonical_answer,
            is_correct=is_correct(question, submitted),
        ))
    return items
