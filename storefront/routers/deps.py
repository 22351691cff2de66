"""
Router dependencies.

Each request is bound to one session via the X-Session-Id header; the
stores it gets are built over that session's storage.
"""
from collections import OrderedDict
from typing import Optional

from fastapi import Depends, Header, HTTPException

from storefront import config
from storefront.cart import CartStore
from storefront.catalog import CatalogClient
from storefront.db import RedisKeys, get_redis
from storefront.errors import ERROR_INVALID_SESSION_ID, ERROR_SESSION_REQUIRED
from storefront.events import EventBus
from storefront.image_cache import ImageCache
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.realtime import RealtimeEmitter
from storefront.storage import KeyValueStorage, MemoryStorage, RedisStorage
from storefront.wishlist import WishlistStore

logger = get_logger(__name__)


class MemorySessions:
    """
    Per-session MemoryStorage instances for the in-process backend.

    Holds at most `max_sessions`; the least recently used session is
    dropped when a new one would exceed that.
    """

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        self.max_sessions = max(1, max_sessions or config.MEMORY_MAX_SESSIONS)
        self._sessions: OrderedDict[str, MemoryStorage] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> MemoryStorage:
        storage = self._sessions.get(session_id)
        if storage is None:
            storage = self._sessions[session_id] = MemoryStorage()
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Evicted in-memory session {sanitize_id_for_logging(evicted)}")
        else:
            self._sessions.move_to_end(session_id)
        return storage

    def clear(self) -> None:
        self._sessions.clear()


memory_sessions = MemorySessions()

# Lazy singletons, created on first use and released in the app lifespan
_image_cache: Optional[ImageCache] = None
_catalog_client: Optional[CatalogClient] = None


def get_image_cache() -> ImageCache:
    global _image_cache
    if _image_cache is None:
        _image_cache = ImageCache()
    return _image_cache


def get_catalog_client() -> CatalogClient:
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogClient()
    return _catalog_client


def close_clients() -> None:
    """Close HTTP clients held by the singletons."""
    global _image_cache, _catalog_client
    if _image_cache is not None:
        _image_cache.close()
        _image_cache = None
    if _catalog_client is not None:
        _catalog_client.close()
        _catalog_client = None


def get_session_id(x_session_id: Optional[str] = Header(default=None)) -> str:
    if not x_session_id or not x_session_id.strip():
        raise HTTPException(status_code=400, detail=ERROR_SESSION_REQUIRED)
    session_id = x_session_id.strip()
    if not RedisKeys.is_valid_session_id(session_id):
        raise HTTPException(status_code=400, detail=ERROR_INVALID_SESSION_ID)
    return session_id


def get_session_storage(session_id: str = Depends(get_session_id)) -> KeyValueStorage:
    if config.STORAGE_BACKEND == "redis":
        return RedisStorage(get_redis(), session_id)
    return memory_sessions.get(session_id)


def get_event_bus(session_id: str = Depends(get_session_id)) -> EventBus:
    bus = EventBus()
    if config.REALTIME_ENABLED:
        RealtimeEmitter(get_redis(), session_id).attach(bus)
    return bus


def get_cart_store(
    storage: KeyValueStorage = Depends(get_session_storage),
    bus: EventBus = Depends(get_event_bus),
) -> CartStore:
    return CartStore(storage, bus)


def get_wishlist_store(
    storage: KeyValueStorage = Depends(get_session_storage),
    bus: EventBus = Depends(get_event_bus),
) -> WishlistStore:
    return WishlistStore(storage, bus)
