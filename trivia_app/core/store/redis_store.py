"""Redis implementation of the storage port."""

from __future__ import annotations

import logging

import redis

from trivia_app.constants.store_constants import DEFAULT_KEY_PREFIX
from trivia_app.core.store.base import KeyValueStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """Stores values and sets in Redis under a shared key prefix.

    Any ``redis.RedisError`` is re-raised as ``StoreUnavailableError`` so
    callers never have to import redis themselves.
    """

    backend_name = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self._client = client
        self._prefix = key_prefix

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._full(key))
        except redis.RedisError as exc:
            raise StoreUnavailableError("get", key, exc) from exc

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(self._full(key), value, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise StoreUnavailableError("set_with_expiry", key, exc) from exc

    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            # SET key value NX EX ttl
            created = self._client.set(self._full(key), value, nx=True, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise StoreUnavailableError("set_if_absent", key, exc) from exc
        return bool(created)

    def add_to_set(self, set_key: str, member: str, ttl_seconds: int) -> None:
        full_key = self._full(set_key)
        try:
            pipe = self._client.pipeline()
            pipe.sadd(full_key, member)
            pipe.expire(full_key, ttl_seconds)
            pipe.execute()
        except redis.RedisError as exc:
            raise StoreUnavailableError("add_to_set", set_key, exc) from exc

    def remove_from_set(self, set_key: str, *members: str) -> None:
        if not members:
            return
        try:
            self._client.srem(self._full(set_key), *members)
        except redis.RedisError as exc:
            raise StoreUnavailableError("remove_from_set", set_key, exc) from exc

    def members(self, set_key: str) -> set[str]:
        try:
            return set(self._client.smembers(self._full(set_key)))
        except redis.RedisError as exc:
            raise StoreUnavailableError("members", set_key, exc) from exc

    def exists(self, key: str) -> bool:
        try:
            return bool(self._client.exists(self._full(key)))
        except redis.RedisError as exc:
            raise StoreUnavailableError("exists", key, exc) from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._full(key))
        except redis.RedisError as exc:
            raise StoreUnavailableError("delete", key, exc) from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False

    def _full(self, key: str) -> str:
        return f"{self._prefix}{key}"
