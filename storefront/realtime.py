"""Realtime Module - mirror store events onto Redis Streams.

Other tabs and processes of the same session read the stream instead of
waiting for a storage-change signal. Streams (XADD) are used rather than
Pub/Sub because the Upstash REST API supports them and they keep history.
"""

import json

from upstash_redis import Redis

from storefront.db import RedisKeys, TTL
from storefront.events import CartUpdated, EventBus, StoreEvent, WishlistUpdated
from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class RealtimeEmitter:
    """Publishes a session's store events to `stream:storefront:{session_id}`."""

    def __init__(self, redis: Redis, session_id: str) -> None:
        self.redis = redis
        self.session_id = session_id
        self.stream_key = RedisKeys.stream_key(session_id)

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every store event on the given bus."""
        bus.subscribe(CartUpdated, self.emit)
        bus.subscribe(WishlistUpdated, self.emit)

    def emit(self, event: StoreEvent) -> None:
        """Fire-and-forget XADD; failures are logged, never raised."""
        try:
            payload = event.to_payload()
            payload["session_id"] = self.session_id
            self.redis.xadd(
                self.stream_key,
                "*",
                {"data": json.dumps(payload)},
                maxlen=TTL.STREAM_MAXLEN,
            )
            logger.debug(f"Emitted {event.name} for session {sanitize_id_for_logging(self.session_id)}")
        except Exception as e:
            logger.warning(f"Failed to emit {event.name}: {e}", exc_info=True)
