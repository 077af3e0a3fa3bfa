"""Service computing per-question statistics from the stored answers."""

from __future__ import annotations

from datetime import datetime
import json
import logging

from trivia_app.constants.quiz_constants import (
    EASY_THRESHOLD_PERCENT,
    MEDIUM_THRESHOLD_PERCENT,
    RECENT_ANSWERERS_LIMIT,
)
from trivia_app.core.models import QuestionStats, RecentAnswerer, UserAnswer
from trivia_app.core.services.question_repository import QuestionRepository
from trivia_app.core.store import keys
from trivia_app.core.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Derives QuestionStats on demand; nothing computed here is persisted."""

    def __init__(
        self,
        store: KeyValueStore,
        questions: QuestionRepository,
        recent_limit: int = RECENT_ANSWERERS_LIMIT,
    ) -> None:
        self._store = store
        self._questions = questions
        self._recent_limit = recent_limit

    def compute(self, question_id: str) -> QuestionStats | None:
        """Return current stats, or None when the question does not exist."""
        if self._questions.get_by_id(question_id) is None:
            return None
        return self.summarize(question_id, self.load_answers(question_id))

    def load_answers(self, question_id: str) -> list[UserAnswer]:
        answers: list[UserAnswer] = []
        for answer_id in self._store.members(keys.answers_by_question_key(question_id)):
            raw = self._store.get(keys.answer_key(answer_id))
            if raw is None:
                logger.debug("Answer %s indexed under %s has no record", answer_id, question_id)
                continue
            answers.append(UserAnswer.from_dict(json.loads(raw)))
        return answers

    def summarize(self, question_id: str, answers: list[UserAnswer]) -> QuestionStats:
        if not answers:
            return QuestionStats(question_id=question_id)

        total = len(answers)
        correct = sum(1 for answer in answers if answer.is_correct)
        newest_first = sorted(answers, key=lambda a: a.answered_at, reverse=True)
        return QuestionStats(
            question_id=question_id,
            total_answers=total,
            correct_answers=correct,
            correct_percentage=correct_percentage(correct, total),
            recent_answerers=[
                RecentAnswerer(
                    user_name=answer.user_name,
                    is_correct=answer.is_correct,
                    answered_at=answer.answered_at,
                )
                for answer in newest_first[: self._recent_limit]
            ],
        )


def correct_percentage(correct: int, total: int) -> int:
    """Percentage of correct answers rounded half up; 0 when there are none."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def difficulty_rating(percentage: int) -> str:
    if percentage >= EASY_THRESHOLD_PERCENT:
        return "Easy"
    if percentage >= MEDIUM_THRESHOLD_PERCENT:
        return "Medium"
    return "Hard"


def format_time_ago(timestamp: datetime, now: datetime) -> str:
    """Short relative age such as ``42s ago`` or ``3h ago``."""
    seconds = max(0, int((now - timestamp).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
