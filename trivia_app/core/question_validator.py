"""Input checks run at the API boundary before the core is invoked."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, cast

from trivia_app.constants.quiz_constants import CHOICE_KEYS, MIN_QUESTION_TEXT_LENGTH
from trivia_app.core.models import AnswerChoice, Choices


class QuestionValidationError(ValueError):
    """Raised when user-supplied question or answer data is malformed."""


@dataclass(slots=True)
class QuestionDraft:
    """Validated, trimmed input for question creation."""

    question_text: str
    choices: Choices
    correct_answer: AnswerChoice


def validate_question(
    question_text: Any,
    choices: Any,
    correct_answer: Any,
) -> QuestionDraft:
    """Check raw request values; anything that is not the expected JSON type is rejected."""
    if not question_text or not choices or not correct_answer:
        raise QuestionValidationError(
            "Missing required fields: question_text, choices, correct_answer"
        )
    if not isinstance(question_text, str):
        raise QuestionValidationError("Question text must be a string")

    cleaned_text = question_text.strip()
    if len(cleaned_text) < MIN_QUESTION_TEXT_LENGTH:
        raise QuestionValidationError(
            f"Question text must be at least {MIN_QUESTION_TEXT_LENGTH} characters long"
        )

    return QuestionDraft(
        question_text=cleaned_text,
        choices=_validate_choices(choices),
        correct_answer=validate_choice(correct_answer, field_name="Correct answer"),
    )


def validate_choice(value: Any, field_name: str = "Selected answer") -> AnswerChoice:
    if not isinstance(value, str) or value not in CHOICE_KEYS:
        raise QuestionValidationError(f"{field_name} must be one of: {', '.join(CHOICE_KEYS)}")
    return cast(AnswerChoice, value)


def _validate_choices(choices: Any) -> Choices:
    if not isinstance(choices, Mapping) or any(not choices.get(key) for key in CHOICE_KEYS):
        raise QuestionValidationError("All four choices (a, b, c, d) are required")
    if any(not isinstance(choices[key], str) for key in CHOICE_KEYS):
        raise QuestionValidationError("All choices must be non-empty strings")
    cleaned = {key: choices[key].strip() for key in CHOICE_KEYS}
    if any(not option for option in cleaned.values()):
        raise QuestionValidationError("All choices must be non-empty strings")
    if len({option.lower() for option in cleaned.values()}) < len(CHOICE_KEYS):
        raise QuestionValidationError("All choices must be unique")
    return Choices.from_dict(cleaned)
