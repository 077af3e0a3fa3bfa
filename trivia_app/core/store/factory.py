"""Selects the storage backend once, at process start."""

from __future__ import annotations

import logging

import redis

from trivia_app.config.settings import Settings
from trivia_app.core.store.base import KeyValueStore
from trivia_app.core.store.memory_store import InMemoryStore
from trivia_app.core.store.redis_store import RedisStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> KeyValueStore:
    """Return a Redis-backed store, or the in-process fallback.

    The fallback is used when Redis is not configured, the URL is malformed
    or the initial ping fails. Once chosen, the backend does not change for the life of the
    process.
    """
    if not settings.redis_configured:
        logger.info("Redis not configured, using in-process store (local development only)")
        return InMemoryStore()

    try:
        client = _build_client(settings)
        client.ping()
    except (redis.RedisError, ValueError) as exc:
        logger.warning("Redis connection failed (falling back to in-process store): %s", exc)
        return InMemoryStore()

    logger.info("Redis connected, key prefix %r", settings.redis_key_prefix)
    return RedisStore(client, key_prefix=settings.redis_key_prefix)


def _build_client(settings: Settings) -> redis.Redis:
    if settings.redis_url:
        return redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_timeout,
        )
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_timeout,
    )
