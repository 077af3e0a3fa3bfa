from __future__ import annotations

import pytest

from trivia_app.constants.quiz_constants import ALREADY_ANSWERED_MESSAGE, QUESTION_NOT_FOUND_MESSAGE
from trivia_app.core.models import Choices
from trivia_app.core.services.answer_repository import AnswerRepository
from trivia_app.core.services.question_repository import QuestionRepository
from trivia_app.core.services.stats_aggregator import StatsAggregator
from trivia_app.core.store import keys
from trivia_app.core.store.base import StoreUnavailableError


@pytest.fixture
def questions(store, clock) -> QuestionRepository:
    return QuestionRepository(store, clock=clock.now)


@pytest.fixture
def answers(store, questions, clock) -> AnswerRepository:
    return AnswerRepository(store, questions, StatsAggregator(store, questions), clock=clock.now)


@pytest.fixture
def question(questions):
    return questions.create(
        "Which letter is Y?", Choices(a="X", b="Y", c="Z", d="W"), "b", "author"
    )


def test_scenario_two_users_then_a_repeat(answers, questions, question, clock):
    first = answers.submit(question.id, "u1", "Ursula", "b")
    assert first.success and first.is_correct
    assert (first.stats.total_answers, first.stats.correct_answers, first.stats.correct_percentage) == (1, 1, 100)

    clock.advance(10)
    second = answers.submit(question.id, "u2", "Umar", "a")
    assert second.success and not second.is_correct
    assert (second.stats.total_answers, second.stats.correct_answers, second.stats.correct_percentage) == (2, 1, 50)

    repeat = answers.submit(question.id, "u1", "Ursula", "c")
    assert not repeat.success
    assert repeat.message == ALREADY_ANSWERED_MESSAGE
    assert repeat.stats is None

    stored = questions.get_by_id(question.id)
    assert (stored.total_answers, stored.correct_answers) == (2, 1)


def test_unknown_question_is_reported_not_raised(answers):
    result = answers.submit("missing", "u1", "Ursula", "a")
    assert not result.success
    assert result.message == QUESTION_NOT_FOUND_MESSAGE
    assert not answers.has_answered("u1", "missing")


def test_submit_records_answer_and_indexes(answers, store, question, clock):
    answers.submit(question.id, "u1", "Ursula", "b")
    stored = answers.get_user_answer("u1", question.id)
    assert stored.selected_answer == "b"
    assert stored.is_correct
    assert stored.user_name == "Ursula"
    assert stored.answered_at == clock.now()
    assert store.members(keys.answers_by_question_key(question.id)) == {stored.id}
    assert store.members(keys.answers_by_user_key("u1")) == {stored.id}
    assert answers.has_answered("u1", question.id)


def test_get_user_answer_absent_when_not_answered(answers, question):
    assert answers.get_user_answer("u1", question.id) is None
    assert not answers.has_answered("u1", question.id)


def test_lost_guard_race_is_rejected(answers, store, question):
    # Another request claimed the guard between the check and the claim.
    original_exists = store.exists
    store.exists = lambda key: False if key.startswith("user-answered:") else original_exists(key)
    store.set_if_absent(keys.user_answered_key("u1", question.id), "true", 60)

    result = answers.submit(question.id, "u1", "Ursula", "b")

    assert not result.success
    assert result.message == ALREADY_ANSWERED_MESSAGE
    assert store.members(keys.answers_by_question_key(question.id)) == set()


def test_guard_released_when_answer_write_fails(answers, store, question):
    def failing_set(key, value, ttl_seconds):
        raise StoreUnavailableError("set_with_expiry", key)

    store.set_with_expiry = failing_set
    with pytest.raises(StoreUnavailableError):
        answers.submit(question.id, "u1", "Ursula", "b")
    assert not answers.has_answered("u1", question.id)


def test_answers_for_questions_limited_to_requested_ids(answers, questions, clock):
    choices = Choices(a="1", b="2", c="3", d="4")
    first = questions.create("First numeric question", choices, "a", "author")
    second = questions.create("Second numeric question", choices, "b", "author")
    third = questions.create("Third numeric question", choices, "c", "author")
    for q in (first, second, third):
        clock.advance(1)
        answers.submit(q.id, "u1", "Ursula", "a")
    answers.submit(first.id, "u2", "Umar", "b")

    found = answers.get_user_answers_for_questions("u1", [first.id, third.id, "unknown"])
    assert set(found) == {first.id, third.id}
    assert found[first.id].is_correct
    assert not found[third.id].is_correct
    assert answers.get_user_answers_for_questions("u1", []) == {}
