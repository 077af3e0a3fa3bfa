from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trivia_app.core.models import Choices
from trivia_app.core.store.memory_store import InMemoryStore
from trivia_app.core.trivia_manager import TriviaManager


class FakeClock:
    """Manually advanced clock shared by the store and the repositories."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self._origin = self._now

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return (self._now - self._origin).total_seconds()

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    return InMemoryStore(clock=clock.monotonic)


@pytest.fixture
def manager(store: InMemoryStore, clock: FakeClock) -> TriviaManager:
    return TriviaManager(store, clock=clock.now)


@pytest.fixture
def sample_choices() -> Choices:
    return Choices(a="X", b="Y", c="Z", d="W")
