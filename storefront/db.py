"""
Redis Module - Upstash client and key layout

Provides a singleton sync Upstash Redis client plus the key names the
stores persist under. The stores are synchronous, so the sync REST
client is used throughout.
"""

import re
from typing import Optional

from upstash_redis import Redis

from storefront import config


_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN

    Used for:
    - Session storage (cart, wishlist, applied promo)
    - Realtime event streams
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class StorageKeys:
    """Key names inside one session's storage, shared with the web front end."""

    CART = "v0_cart"
    APPLIED_PROMO = "appliedPromo"
    WISHLIST = "wishlist"

    # Survive "clear site data"
    COOKIE_CONSENT = "cookie-consent"
    COOKIE_CONSENT_TIME = "cookie-consent-time"
    CACHE_ENABLED = "cache-enabled"

    PRESERVED = (COOKIE_CONSENT, COOKIE_CONSENT_TIME, CACHE_ENABLED)


class RedisKeys:
    """Redis key prefixes for session namespaces and event streams."""

    SESSION = "session:"  # session:{session_id}:{storage key}
    STREAM = "stream:storefront:"  # stream:storefront:{session_id}

    # No ":" or glob characters, so one session prefix never matches another
    SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,128}")

    @staticmethod
    def is_valid_session_id(session_id: str) -> bool:
        return bool(RedisKeys.SESSION_ID_PATTERN.fullmatch(session_id))

    @staticmethod
    def session_prefix(session_id: str) -> str:
        return f"{RedisKeys.SESSION}{session_id}:"

    @staticmethod
    def stream_key(session_id: str) -> str:
        return f"{RedisKeys.STREAM}{session_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    SESSION = config.SESSION_TTL_SECONDS
    STREAM_MAXLEN = 100  # entries kept per session stream
