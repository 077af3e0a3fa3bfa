"""Runtime configuration read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from dotenv import load_dotenv

from trivia_app.constants.network_constants import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from trivia_app.constants.store_constants import (
    DEFAULT_KEY_PREFIX,
    DEFAULT_REDIS_DB,
    DEFAULT_REDIS_PORT,
    DEFAULT_SOCKET_TIMEOUT_SECONDS,
)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable application settings."""

    redis_url: str | None = None
    redis_host: str | None = None
    redis_port: int = DEFAULT_REDIS_PORT
    redis_password: str | None = None
    redis_db: int = DEFAULT_REDIS_DB
    redis_socket_timeout: float = DEFAULT_SOCKET_TIMEOUT_SECONDS
    redis_key_prefix: str = DEFAULT_KEY_PREFIX
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    seed_sample_data: bool = True
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def redis_configured(self) -> bool:
        return bool(self.redis_url or self.redis_host)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` after loading .env)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        def _get(name: str) -> str | None:
            value = environ.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        return cls(
            redis_url=_get("REDIS_URL"),
            redis_host=_get("REDIS_HOST"),
            redis_port=int(_get("REDIS_PORT") or DEFAULT_REDIS_PORT),
            redis_password=_get("REDIS_PASSWORD"),
            redis_db=int(_get("REDIS_DB") or DEFAULT_REDIS_DB),
            redis_socket_timeout=float(_get("REDIS_SOCKET_TIMEOUT") or DEFAULT_SOCKET_TIMEOUT_SECONDS),
            redis_key_prefix=_get("REDIS_KEY_PREFIX") or DEFAULT_KEY_PREFIX,
            host=_get("TRIVIA_HOST") or DEFAULT_HOST,
            port=int(_get("TRIVIA_PORT") or DEFAULT_PORT),
            seed_sample_data=(_get("TRIVIA_SEED_SAMPLE_DATA") or "true").lower() in _TRUTHY,
            log_level=(_get("LOG_LEVEL") or "INFO").upper(),
            cors_origins=_parse_origins(_get("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS),
        )


def _parse_origins(raw: str) -> tuple[str, ...]:
    raw = raw.strip()
    if not raw or raw == "*":
        return ("*",)
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())
