"""Storage port shared by the Redis and in-process backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StoreUnavailableError(RuntimeError):
    """Raised when the backing store cannot complete an operation."""

    def __init__(self, operation: str, key: str | None, cause: Exception | None = None) -> None:
        detail = f"{operation} failed"
        if key is not None:
            detail = f"{operation} failed for key {key!r}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
        self.operation = operation
        self.key = key


class KeyValueStore(ABC):
    """Minimal string/set store with per-key time-to-live.

    Repositories depend on this interface only; they never know which
    backend is active.
    """

    backend_name: str = "abstract"

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored at ``key`` or ``None`` when absent or expired."""

    @abstractmethod
    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` at ``key``, replacing any previous value and TTL."""

    @abstractmethod
    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically store ``value`` only if ``key`` does not exist.

        Returns True when this call created the key.
        """

    @abstractmethod
    def add_to_set(self, set_key: str, member: str, ttl_seconds: int) -> None:
        """Add ``member`` to the set and refresh the set's TTL."""

    @abstractmethod
    def remove_from_set(self, set_key: str, *members: str) -> None:
        """Remove ``members`` from the set; missing members are ignored."""

    @abstractmethod
    def members(self, set_key: str) -> set[str]:
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass
