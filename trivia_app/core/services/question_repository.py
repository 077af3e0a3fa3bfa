"""Service for creating, storing and listing trivia questions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json
import logging
import math
from typing import Callable
from uuid import uuid4

from trivia_app.constants.quiz_constants import QUESTION_RETENTION_SECONDS
from trivia_app.core.models import AnswerChoice, Choices, Question
from trivia_app.core.store import keys
from trivia_app.core.store.base import KeyValueStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuestionRepository:
    """Manages the lifecycle and storage of questions.

    Every question lives for ``QUESTION_RETENTION_SECONDS`` after creation.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock

    def create(
        self,
        question_text: str,
        choices: Choices,
        correct_answer: AnswerChoice,
        created_by: str,
    ) -> Question:
        """Persist a new question and register it in the recent and per-creator indexes."""
        question = Question(
            id=uuid4().hex,
            created_by=created_by,
            created_at=self._clock(),
            question_text=question_text.strip(),
            choices=Choices(
                a=choices.a.strip(),
                b=choices.b.strip(),
                c=choices.c.strip(),
                d=choices.d.strip(),
            ),
            correct_answer=correct_answer,
        )
        self._store.set_with_expiry(
            keys.question_key(question.id),
            json.dumps(question.to_dict()),
            QUESTION_RETENTION_SECONDS,
        )
        self._store.add_to_set(keys.recent_questions_key(), question.id, QUESTION_RETENTION_SECONDS)
        self._store.add_to_set(
            keys.questions_by_user_key(created_by), question.id, QUESTION_RETENTION_SECONDS
        )
        logger.info("Created question %s by %s", question.id, created_by)
        return question

    def get_by_id(self, question_id: str) -> Question | None:
        raw = self._store.get(keys.question_key(question_id))
        if raw is None:
            return None
        return Question.from_dict(json.loads(raw))

    def save(self, question: Question) -> None:
        """Persist an updated question without extending its lifetime."""
        ttl = self.remaining_lifetime_seconds(question)
        if ttl <= 0:
            logger.debug("Skipping save of expired question %s", question.id)
            return
        self._store.set_with_expiry(keys.question_key(question.id), json.dumps(question.to_dict()), ttl)

    def list_recent(self) -> list[Question]:
        """Return all unexpired questions, newest first."""
        return self._load_sorted(keys.recent_questions_key())

    def list_by_creator(self, user_id: str) -> list[Question]:
        return self._load_sorted(keys.questions_by_user_key(user_id))

    def is_expired(self, question: Question) -> bool:
        cutoff = self._clock() - timedelta(seconds=QUESTION_RETENTION_SECONDS)
        return question.created_at <= cutoff

    def remaining_lifetime_seconds(self, question: Question) -> int:
        expires_at = question.created_at + timedelta(seconds=QUESTION_RETENTION_SECONDS)
        return math.ceil((expires_at - self._clock()).total_seconds())

    def _load_sorted(self, index_key: str) -> list[Question]:
        questions: list[Question] = []
        stale: list[str] = []
        for question_id in self._store.members(index_key):
            question = self.get_by_id(question_id)
            # The index outlives individual records; drop ids whose record is gone.
            if question is None or self.is_expired(question):
                stale.append(question_id)
                continue
            questions.append(question)
        if stale:
            self._store.remove_from_set(index_key, *stale)
            logger.debug("Pruned %d expired question ids from %s", len(stale), index_key)
        return sorted(questions, key=lambda q: q.created_at, reverse=True)
