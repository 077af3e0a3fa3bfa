"""In-process store used when Redis is unavailable (local development)."""

from __future__ import annotations

from threading import Lock
import time
from typing import Callable

from trivia_app.core.store.base import KeyValueStore

SWEEP_INTERVAL_SECONDS: float = 60.0


class InMemoryStore(KeyValueStore):
    """Dict/set backed implementation of the storage port.

    Expired keys are evicted when accessed, and every write sweeps all
    expired keys at most once per ``SWEEP_INTERVAL_SECONDS``, so records
    nobody reads again do not pile up. Nothing survives a restart.
    """

    backend_name = "memory"

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._clock = clock
        self._lock = Lock()
        self._values: dict[str, str] = {}
        self._sets: dict[str, set[str]] = {}
        self._deadlines: dict[str, float] = {}
        self._sweep_interval = sweep_interval_seconds
        self._next_sweep = clock() + sweep_interval_seconds

    def get(self, key: str) -> str | None:
        with self._lock:
            self._evict_if_expired(key)
            return self._values.get(key)

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._sweep_if_due()
            self._sets.pop(key, None)
            self._values[key] = value
            self._deadlines[key] = self._clock() + ttl_seconds

    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            self._sweep_if_due()
            self._evict_if_expired(key)
            if key in self._values or key in self._sets:
                return False
            self._values[key] = value
            self._deadlines[key] = self._clock() + ttl_seconds
            return True

    def add_to_set(self, set_key: str, member: str, ttl_seconds: int) -> None:
        with self._lock:
            self._sweep_if_due()
            self._evict_if_expired(set_key)
            if set_key in self._values:
                raise TypeError(f"Key {set_key!r} holds a plain value, not a set.")
            self._sets.setdefault(set_key, set()).add(member)
            self._deadlines[set_key] = self._clock() + ttl_seconds

    def remove_from_set(self, set_key: str, *members: str) -> None:
        with self._lock:
            self._evict_if_expired(set_key)
            current = self._sets.get(set_key)
            if current is None:
                return
            current.difference_update(members)
            # Redis drops a set once its last member is removed.
            if not current:
                self._drop(set_key)

    def members(self, set_key: str) -> set[str]:
        with self._lock:
            self._evict_if_expired(set_key)
            return set(self._sets.get(set_key, ()))

    def exists(self, key: str) -> bool:
        with self._lock:
            self._evict_if_expired(key)
            return key in self._values or key in self._sets

    def delete(self, key: str) -> None:
        with self._lock:
            self._drop(key)

    def ping(self) -> bool:
        return True

    def key_count(self) -> int:
        """Number of keys held, expired ones included until they are swept."""
        with self._lock:
            return len(self._values) + len(self._sets)

    def clear(self) -> None:
        """Drop every key."""
        with self._lock:
            self._values.clear()
            self._sets.clear()
            self._deadlines.clear()

    def _sweep_if_due(self) -> None:
        now = self._clock()
        if now < self._next_sweep:
            return
        self._next_sweep = now + self._sweep_interval
        expired = [key for key, deadline in self._deadlines.items() if deadline <= now]
        for key in expired:
            self._drop(key)

    def _evict_if_expired(self, key: str) -> None:
        deadline = self._deadlines.get(key)
        if deadline is not None and deadline <= self._clock():
            self._drop(key)

    def _drop(self, key: str) -> None:
        self._values.pop(key, None)
        self._sets.pop(key, None)
        self._deadlines.pop(key, None)
