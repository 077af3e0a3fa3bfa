"""Service recording answers with at most one answer per user per question."""

from __future__ import annotations

from datetime import datetime
import json
import logging
from typing import Callable, Iterable
from uuid import uuid4

from trivia_app.constants.quiz_constants import (
    ALREADY_ANSWERED_MESSAGE,
    CORRECT_MESSAGE,
    INCORRECT_MESSAGE,
    QUESTION_NOT_FOUND_MESSAGE,
    QUESTION_RETENTION_SECONDS,
)
from trivia_app.core.models import AnswerChoice, SubmitResult, UserAnswer
from trivia_app.core.services.question_repository import QuestionRepository, utc_now
from trivia_app.core.services.stats_aggregator import StatsAggregator
from trivia_app.core.store import keys
from trivia_app.core.store.base import KeyValueStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class AnswerRepository:
    """Owns UserAnswer records, their indexes and the uniqueness guard."""

    def __init__(
        self,
        store: KeyValueStore,
        questions: QuestionRepository,
        stats: StatsAggregator,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._questions = questions
        self._stats = stats
        self._clock = clock

    def submit(
        self,
        question_id: str,
        user_id: str,
        user_name: str,
        selected_answer: AnswerChoice,
    ) -> SubmitResult:
        """Record a user's answer and return fresh stats for the question."""
        if self.has_answered(user_id, question_id):
            logger.info("Rejected repeat answer by %s on %s", user_id, question_id)
            return SubmitResult(success=False, is_correct=False, message=ALREADY_ANSWERED_MESSAGE)

        question = self._questions.get_by_id(question_id)
        if question is None:
            return SubmitResult(success=False, is_correct=False, message=QUESTION_NOT_FOUND_MESSAGE)

        is_correct = selected_answer == question.correct_answer

        guard_key = keys.user_answered_key(user_id, question_id)
        if not self._store.set_if_absent(guard_key, "true", QUESTION_RETENTION_SECONDS):
            # Lost the race to a concurrent submission from the same user.
            logger.info("Rejected concurrent answer by %s on %s", user_id, question_id)
            return SubmitResult(success=False, is_correct=False, message=ALREADY_ANSWERED_MESSAGE)

        answer = UserAnswer(
            id=uuid4().hex,
            question_id=question_id,
            user_id=user_id,
            selected_answer=selected_answer,
            is_correct=is_correct,
            answered_at=self._clock(),
            user_name=user_name,
        )
        try:
            self._persist(answer)
        except StoreUnavailableError:
            self._release_guard(guard_key)
            raise

        stats = self._stats.summarize(question_id, self._stats.load_answers(question_id))
        question.total_answers = stats.total_answers
        question.correct_answers = stats.correct_answers
        self._questions.save(question)

        logger.info(
            "Recorded answer %s by %s on %s (correct=%s)",
            answer.id,
            user_id,
            question_id,
            is_correct,
        )
        return SubmitResult(
            success=True,
            is_correct=is_correct,
            message=CORRECT_MESSAGE if is_correct else INCORRECT_MESSAGE,
            stats=stats,
        )

    def has_answered(self, user_id: str, question_id: str) -> bool:
        return self._store.exists(keys.user_answered_key(user_id, question_id))

    def get_user_answer(self, user_id: str, question_id: str) -> UserAnswer | None:
        if not self.has_answered(user_id, question_id):
            return None
        for answer in self._load_user_answers(user_id):
            if answer.question_id == question_id:
                return answer
        return None

    def get_user_answers_for_questions(
        self, user_id: str, question_ids: Iterable[str]
    ) -> dict[str, UserAnswer]:
        """Return the user's answers keyed by question id, limited to ``question_ids``."""
        wanted = set(question_ids)
        if not wanted:
            return {}
        return {
            answer.question_id: answer
            for answer in self._load_user_answers(user_id)
            if answer.question_id in wanted
        }

    def _persist(self, answer: UserAnswer) -> None:
        self._store.set_with_expiry(
            keys.answer_key(answer.id), json.dumps(answer.to_dict()), QUESTION_RETENTION_SECONDS
        )
        self._store.add_to_set(
            keys.answers_by_question_key(answer.question_id), answer.id, QUESTION_RETENTION_SECONDS
        )
        self._store.add_to_set(
            keys.answers_by_user_key(answer.user_id), answer.id, QUESTION_RETENTION_SECONDS
        )

    def _release_guard(self, guard_key: str) -> None:
        try:
            self._store.delete(guard_key)
        except StoreUnavailableError as exc:
            logger.error("Could not release answer guard %s: %s", guard_key, exc)

    def _load_user_answers(self, user_id: str) -> list[UserAnswer]:
        answers: list[UserAnswer] = []
        for answer_id in self._store.members(keys.answers_by_user_key(user_id)):
            raw = self._store.get(keys.answer_key(answer_id))
            if raw is not None:
                answers.append(UserAnswer.from_dict(json.loads(raw)))
        return answers
