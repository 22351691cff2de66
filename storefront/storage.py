"""
Key-value storage backends.

The stores only need what a browser's local storage offers: string values
under string keys. `MemoryStorage` keeps them in-process, `RedisStorage`
keeps one namespace per session in Upstash Redis.
"""

from typing import Iterable, Optional, Protocol

from upstash_redis import Redis

from storefront.db import RedisKeys, StorageKeys, TTL
from storefront.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """What the stores require from a backend."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStorage:
    """In-process storage, one instance per session."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


class RedisStorage:
    """
    Upstash Redis storage scoped to a single session.

    Keys are written as `session:{session_id}:{key}` so that each session
    sees the same key names the front end uses (`v0_cart`, `wishlist`, ...).
    """

    def __init__(self, redis: Redis, session_id: str, ttl: Optional[int] = TTL.SESSION) -> None:
        if not RedisKeys.is_valid_session_id(session_id):
            raise ValueError(f"Invalid session id: {session_id!r}")
        self.redis = redis
        self.session_id = session_id
        self.prefix = RedisKeys.session_prefix(session_id)
        self.ttl = ttl or None

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self.redis.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value, ex=self.ttl)

    def delete(self, key: str) -> None:
        self.redis.delete(self._key(key))

    def keys(self) -> list[str]:
        return [key[len(self.prefix):] for key in self.redis.keys(f"{self.prefix}*") if key.startswith(self.prefix)]


def clear_site_data(storage: KeyValueStorage, keep: Iterable[str] = StorageKeys.PRESERVED) -> list[str]:
    """
    Remove everything from a session's storage except the consent keys.

    Returns:
        The keys that were removed
    """
    preserved = set(keep)
    removed = [key for key in storage.keys() if key not in preserved]
    for key in removed:
        storage.delete(key)
    logger.info("Cleared %d storage keys", len(removed))
    return removed


def is_cache_enabled(storage: KeyValueStorage) -> bool:
    """Whether the visitor opted into client-side caching."""
    return storage.get(StorageKeys.CACHE_ENABLED) == "true"
