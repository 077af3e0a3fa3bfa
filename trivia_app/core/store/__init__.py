"""Key-value storage port and its Redis / in-process implementations."""

from .base import KeyValueStore, StoreUnavailableError
from .factory import create_store
from .memory_store import InMemoryStore
from .redis_store import RedisStore

__all__ = [
    "InMemoryStore",
    "KeyValueStore",
    "RedisStore",
    "StoreUnavailableError",
    "create_store",
]
