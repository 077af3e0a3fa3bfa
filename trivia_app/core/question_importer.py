"""Parses questions from the plain-text format used for sample data.

File format (blocks separated by blank lines or '---'):

    Q: Question text. Additional lines until the next marker are part of
       the question.
    A: First choice
    B: Second choice
    C: Third choice
    D: Fourth choice
    CORRECT: A|B|C|D
    AUTHOR: user id recorded as the creator (optional)

Every block goes through the same validation as questions submitted over
the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from trivia_app.core.question_validator import (
    QuestionDraft,
    QuestionValidationError,
    validate_question,
)

_OPTION_ORDER = ["A", "B", "C", "D"]
DEFAULT_AUTHOR = "sample-user"


class QuestionImportError(Exception):
    """Raised when a question file cannot be parsed."""


@dataclass(slots=True)
class ImportedQuestion:
    draft: QuestionDraft
    author: str


def load_questions_from_file(file_path: Path) -> list[ImportedQuestion]:
    questions = parse_questions(file_path.read_text(encoding="utf-8"))
    if not questions:
        raise QuestionImportError(f"{file_path} did not contain any questions.")
    return questions


def parse_questions(text: str) -> list[ImportedQuestion]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> ImportedQuestion:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    author = DEFAULT_AUTHOR
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("AUTHOR:"):
            author = line.split(":", 1)[1].strip() or DEFAULT_AUTHOR
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionImportError(f"Encountered text outside of a known section: '{line}'.")

    if correct_letter is None:
        raise QuestionImportError("Each question needs a CORRECT: line.")

    try:
        draft = validate_question(
            "\n".join(question_lines),
            {letter.lower(): options.get(letter) for letter in _OPTION_ORDER},
            correct_letter.lower(),
        )
    except QuestionValidationError as exc:
        raise QuestionImportError(str(exc)) from exc
    return ImportedQuestion(draft=draft, author=author)
