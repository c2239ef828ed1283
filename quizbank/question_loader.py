"""
Loading the question bank from a JSON document.
Accepted shapes: {"questions": [...]} or a bare [...].
Source is a local path or an http(s) URL, read once per run.
"""
import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Set

import aiohttp
from pydantic import ValidationError

from config.settings import settings
from .errors import LoadError
from .models import Question

logger = logging.getLogger(__name__)

def parse_question_bank(document: Any, source: str = "") -> List[Question]:
    """
    Normalizes a loaded document into an ordered list of questions.
    The `questions` field is tried first, then the document itself.
    """
    raw = document
    if isinstance(document, dict):
        raw = document.get("questions")
    if not isinstance(raw, list):
        raise LoadError("Question bank is neither a list nor an object with a 'questions' list", source)

    questions: List[Question] = []
    seen: Set[str] = set()
    for idx, item in enumerate(raw):
        if not isinstance(item, dict) or "id" not in item or "type" not in item:
            raise LoadError(f"Entry #{idx} is not an object with 'id' and 'type'", source)
        try:
            q = Question.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skip question #{idx} ({item.get('id')}): {e.error_count()} invalid field(s)")
            continue
        if q.id in seen:
            logger.warning(f"Skip question #{idx}: duplicate id {q.id}")
            continue
        if q.canonical_answer is None:
            logger.warning(f"Question {q.id} has no answer, it can never be scored correct")
        seen.add(q.id)
        questions.append(q)

    logger.info(f"Loaded {len(questions)}/{len(raw)} questions from {source}")
    return questions

def read_question_bank(path: Path) -> List[Question]:
    """Reads the bank from a local JSON file."""
    source = str(path)
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError:
        raise LoadError("Question bank file not found", source) from None
    except PermissionError:
        raise LoadError("Question bank file is not readable", source) from None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadError(f"Question bank is not valid JSON ({e})", source) from e
    return parse_question_bank(document, source)

async def fetch_question_bank(url: str, timeout: float = 30.0) -> List[Question]:
    """Fetches the bank over HTTP(S)."""
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.get(url) as resp:
                if resp.status != 200:
                    raise LoadError(f"Question bank request failed with HTTP {resp.status}", url)
                body = await resp.read()
    except aiohttp.ClientError as e:
        raise LoadError(f"Question bank is unreachable ({e})", url) from e
    except asyncio.TimeoutError as e:
        raise LoadError("Question bank request timed out", url) from e
    try:
        document = json.loads(body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadError(f"Question bank is not valid JSON ({e})", url) from e
    return parse_question_bank(document, url)

async def load_question_bank(source: Optional[str] = None) -> List[Question]:
    """Reads the bank from `source` (defaults to settings.questions_source)."""
    source = source or settings.questions_source
    if source.startswith(("http://", "https://")):
        return await fetch_question_bank(source)
    return read_question_bank(Path(source))

class LoadStatus(str, Enum):
    PENDING = "pending"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"

class QuestionBank:
    """The bank of one run: loaded once, read-only afterwards, no retry."""

    def __init__(self, source: Optional[str] = None):
        self.source = source or settings.questions_source
        self.status = LoadStatus.PENDING
        self.questions: List[Question] = []
        self.error: Optional[LoadError] = None

    async def load(self) -> None:
        if self.status is not LoadStatus.PENDING:
            return
        self.status = LoadStatus.LOADING
        try:
            self.questions = await load_question_bank(self.source)
        except LoadError as e:
            self.error = e
            self.status = LoadStatus.FAILED
            logger.error(f"Question bank load failed: {e}")
            return
        self.status = LoadStatus.READY

    @property
    def ready(self) -> bool:
        return self.status is LoadStatus.READY
