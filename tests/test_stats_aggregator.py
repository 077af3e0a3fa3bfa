from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trivia_app.core.services.stats_aggregator import (
    correct_percentage,
    difficulty_rating,
    format_time_ago,
)


def test_stats_for_unknown_question_is_none(manager):
    assert manager.get_question_stats("nope") is None


def test_zero_answer_question_has_zeroed_stats(manager, sample_choices):
    question = manager.create_question("Nobody has answered this", sample_choices, "a", "author")
    stats = manager.get_question_stats(question.id)
    assert stats.question_id == question.id
    assert stats.total_answers == 0
    assert stats.correct_answers == 0
    assert stats.correct_percentage == 0
    assert stats.recent_answerers == []


def test_totals_and_percentage_for_many_answerers(manager, clock, sample_choices):
    question = manager.create_question("Seven people answer this", sample_choices, "c", "author")
    picks = ["c", "c", "a", "c", "b", "d", "c"]
    for index, pick in enumerate(picks):
        clock.advance(1)
        manager.submit_answer(question.id, f"user-{index}", f"User {index}", pick)

    stats = manager.get_question_stats(question.id)
    assert stats.total_answers == 7
    assert stats.correct_answers == 4
    assert stats.correct_percentage == round(100 * 4 / 7)


def test_recent_answerers_are_capped_and_newest_first(manager, clock, sample_choices):
    question = manager.create_question("Twelve people answer this", sample_choices, "a", "author")
    for index in range(12):
        clock.advance(5)
        manager.submit_answer(question.id, f"user-{index}", f"User {index}", "a" if index % 2 else "b")

    stats = manager.get_question_stats(question.id)
    assert stats.total_answers == 12
    assert len(stats.recent_answerers) == 10
    assert [a.user_name for a in stats.recent_answerers] == [f"User {i}" for i in range(11, 1, -1)]
    times = [a.answered_at for a in stats.recent_answerers]
    assert times == sorted(times, reverse=True)


def test_recent_answerers_shorter_than_limit(manager, clock, sample_choices):
    question = manager.create_question("Only three people answer", sample_choices, "a", "author")
    for index in range(3):
        clock.advance(1)
        manager.submit_answer(question.id, f"user-{index}", f"User {index}", "a")
    assert len(manager.get_question_stats(question.id).recent_answerers) == 3


@pytest.mark.parametrize(
    ("correct", "total", "expected"),
    [(0, 0, 0), (0, 3, 0), (1, 2, 50), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 3, 100)],
)
def test_correct_percentage_rounds_half_up(correct, total, expected):
    assert correct_percentage(correct, total) == expected


@pytest.mark.parametrize(
    ("percentage", "rating"),
    [(100, "Easy"), (80, "Easy"), (79, "Medium"), (50, "Medium"), (49, "Hard"), (0, "Hard")],
)
def test_difficulty_rating(percentage, rating):
    assert difficulty_rating(percentage) == rating


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0s ago"), (59, "59s ago"), (60, "1m ago"), (3599, "59m ago"), (7200, "2h ago"), (90000, "1d ago")],
)
def test_format_time_ago(seconds, expected):
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert format_time_ago(now - timedelta(seconds=seconds), now) == expected
