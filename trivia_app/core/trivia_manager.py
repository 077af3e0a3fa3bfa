"""Business logic facade shared by the API layer and the entry point."""

from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
from typing import Callable, Iterable

from trivia_app.core.models import (
    AnswerChoice,
    Choices,
    Question,
    QuestionFeedItem,
    QuestionStats,
    SubmitResult,
    UserAnswer,
)
from trivia_app.core.question_importer import load_questions_from_file
from trivia_app.core.services.answer_repository import AnswerRepository
from trivia_app.core.services.question_repository import QuestionRepository, utc_now
from trivia_app.core.services.stats_aggregator import StatsAggregator
from trivia_app.core.store.base import KeyValueStore

logger = logging.getLogger(__name__)

SAMPLE_QUESTIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_questions.txt"


class TriviaManager:
    """Facade for the trivia services: questions, answers and statistics."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock

        # Services
        self._questions = QuestionRepository(store, clock=clock)
        self._stats = StatsAggregator(store, self._questions)
        self._answers = AnswerRepository(store, self._questions, self._stats, clock=clock)

    @property
    def backend_name(self) -> str:
        return self._store.backend_name

    def now(self) -> datetime:
        return self._clock()

    def is_store_healthy(self) -> bool:
        return self._store.ping()

    # --- Questions ---

    def create_question(
        self,
        question_text: str,
        choices: Choices,
        correct_answer: AnswerChoice,
        created_by: str,
    ) -> Question:
        return self._questions.create(question_text, choices, correct_answer, created_by)

    def list_recent_questions(self) -> list[Question]:
        return self._questions.list_recent()

    def list_questions_by_creator(self, user_id: str) -> list[Question]:
        return self._questions.list_by_creator(user_id)

    def get_question(self, question_id: str) -> Question | None:
        return self._questions.get_by_id(question_id)

    # --- Answers ---

    def submit_answer(
        self,
        question_id: str,
        user_id: str,
        user_name: str,
        selected_answer: AnswerChoice,
    ) -> SubmitResult:
        return self._answers.submit(question_id, user_id, user_name, selected_answer)

    def has_answered(self, user_id: str, question_id: str) -> bool:
        return self._answers.has_answered(user_id, question_id)

    def get_user_answer(self, user_id: str, question_id: str) -> UserAnswer | None:
        return self._answers.get_user_answer(user_id, question_id)

    def get_user_answers_for_questions(
        self, user_id: str, question_ids: Iterable[str]
    ) -> dict[str, UserAnswer]:
        return self._answers.get_user_answers_for_questions(user_id, question_ids)

    # --- Statistics ---

    def get_question_stats(self, question_id: str) -> QuestionStats | None:
        return self._stats.compute(question_id)

    def get_feed(self, user_id: str) -> list[QuestionFeedItem]:
        """Every recent question, annotated with what ``user_id`` may see.

        Answered questions carry the user's answer and current stats; the
        rest carry neither. The correct answer is shown to the author too.
        """
        questions = self._questions.list_recent()
        answers = self._answers.get_user_answers_for_questions(user_id, [q.id for q in questions])
        feed: list[QuestionFeedItem] = []
        for question in questions:
            user_answer = answers.get(question.id)
            stats = None
            if user_answer is not None:
                stats = self._stats.summarize(question.id, self._stats.load_answers(question.id))
            feed.append(
                QuestionFeedItem(
                    question=question,
                    is_my_question=question.created_by == user_id,
                    user_answer=user_answer,
                    stats=stats,
                )
            )
        return feed

    # --- Sample data ---

    def seed_sample_questions(self, file_path: Path = SAMPLE_QUESTIONS_PATH) -> int:
        """Create the sample questions unless the store already has recent questions."""
        if self._questions.list_recent():
            logger.debug("Store already holds questions, skipping sample data")
            return 0
        imported = load_questions_from_file(file_path)
        for item in imported:
            self._questions.create(
                item.draft.question_text,
                item.draft.choices,
                item.draft.correct_answer,
                item.author,
            )
        logger.info("Seeded %d sample questions", len(imported))
        return len(imported)
