"""
Pool selection: filter by type, shuffle, truncate to the configured size.
"""
import random
from typing import List, Optional, Sequence

from .models import Question, QuestionType, QuizConfig

def is_eligible(question: Question, include_code: bool) -> bool:
    if question.type is QuestionType.APTITUDE:
        return True
    return include_code and question.type is QuestionType.CODE

def select_pool(
    questions: Sequence[Question],
    config: QuizConfig,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Returns a fresh shuffled pool for `config`.
    rng.shuffle is Fisher-Yates, every permutation equally likely.
    """
    rng = rng or random.Random()
    filtered = [q for q in questions if is_eligible(q, config.include_code)]
    rng.shuffle(filtered)
    return filtered[:min(config.pool_size, len(filtered))]
