"""Domain models for the trivia application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

AnswerChoice = Literal["a", "b", "c", "d"]


@dataclass(slots=True)
class Choices:
    """The four labelled options of a question."""

    a: str
    b: str
    c: str
    d: str

    def as_dict(self) -> dict[str, str]:
        return {"a": self.a, "b": self.b, "c": self.c, "d": self.d}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "Choices":
        return cls(a=data["a"], b=data["b"], c=data["c"], d=data["d"])


@dataclass(slots=True)
class Question:
    """Multiple-choice question with exactly four choices."""

    id: str
    created_by: str
    created_at: datetime
    question_text: str
    choices: Choices
    correct_answer: AnswerChoice
    total_answers: int = 0
    correct_answers: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "question_text": self.question_text,
            "choices": self.choices.as_dict(),
            "correct_answer": self.correct_answer,
            "total_answers": self.total_answers,
            "correct_answers": self.correct_answers,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        return cls(
            id=data["id"],
            created_by=data["created_by"],
            created_at=datetime.fromisoformat(data["created_at"]),
            question_text=data["question_text"],
            choices=Choices.from_dict(data["choices"]),
            correct_answer=data["correct_answer"],
            total_answers=int(data.get("total_answers", 0)),
            correct_answers=int(data.get("correct_answers", 0)),
        )


@dataclass(slots=True)
class UserAnswer:
    """A single user's recorded response to one question. Never modified."""

    id: str
    question_id: str
    user_id: str
    selected_answer: AnswerChoice
    is_correct: bool
    answered_at: datetime
    user_name: str  # Cached so stats never need the identity provider

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question_id": self.question_id,
            "user_id": self.user_id,
            "selected_answer": self.selected_answer,
            "is_correct": self.is_correct,
            "answered_at": self.answered_at.isoformat(),
            "user_name": self.user_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserAnswer":
        return cls(
            id=data["id"],
            question_id=data["question_id"],
            user_id=data["user_id"],
            selected_answer=data["selected_answer"],
            is_correct=bool(data["is_correct"]),
            answered_at=datetime.fromisoformat(data["answered_at"]),
            user_name=data["user_name"],
        )


@dataclass(slots=True)
class RecentAnswerer:
    """Projection of a UserAnswer shown in question statistics."""

    user_name: str
    is_correct: bool
    answered_at: datetime


@dataclass(slots=True)
class QuestionStats:
    """Aggregate computed on demand from the answers to a question."""

    question_id: str
    total_answers: int = 0
    correct_answers: int = 0
    correct_percentage: int = 0
    recent_answerers: list[RecentAnswerer] = field(default_factory=list)


@dataclass(slots=True)
class SubmitResult:
    """Outcome of an answer submission.

    Rejections (already answered, unknown question) are reported through
    ``success=False`` rather than raised.
    """

    success: bool
    is_correct: bool
    message: str
    stats: QuestionStats | None = None


@dataclass(slots=True)
class QuestionFeedItem:
    """A question annotated with the requesting user's answer status."""

    question: Question
    is_my_question: bool
    user_answer: UserAnswer | None = None
    stats: QuestionStats | None = None

    @property
    def is_answered(self) -> bool:
        return self.user_answer is not None

    @property
    def reveals_correct_answer(self) -> bool:
        """Authors always see their own answer key; everyone else after answering."""
        return self.is_my_question or self.is_answered
