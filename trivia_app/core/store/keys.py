"""Builders for the store keys used by the repositories."""

from __future__ import annotations

from trivia_app.constants import store_constants as layout


def question_key(question_id: str) -> str:
    return layout.QUESTION_KEY.format(question_id=question_id)


def recent_questions_key() -> str:
    return layout.RECENT_QUESTIONS_KEY


def questions_by_user_key(user_id: str) -> str:
    return layout.QUESTIONS_BY_USER_KEY.format(user_id=user_id)


def answer_key(answer_id: str) -> str:
    return layout.ANSWER_KEY.format(answer_id=answer_id)


def answers_by_question_key(question_id: str) -> str:
    return layout.ANSWERS_BY_QUESTION_KEY.format(question_id=question_id)


def answers_by_user_key(user_id: str) -> str:
    return layout.ANSWERS_BY_USER_KEY.format(user_id=user_id)


def user_answered_key(user_id: str, question_id: str) -> str:
    return layout.USER_ANSWERED_KEY.format(user_id=user_id, question_id=question_id)
