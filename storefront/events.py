"""
Store change notifications.

Every persisted mutation of the cart or wishlist publishes a typed event
carrying a snapshot of the new collection. Listeners register per event
type and get back a callable that unsubscribes them.

Usage:
    bus = EventBus()
    unsubscribe = bus.subscribe(CartUpdated, lambda event: render(event.items))
    ...
    unsubscribe()
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, TypeVar

from storefront.logging import get_logger

logger = get_logger(__name__)

CART_UPDATED = "v0-cart-updated"
WISHLIST_UPDATED = "wishlist-updated"


@dataclass(frozen=True)
class StoreEvent:
    """Base class for store notifications."""

    items: tuple
    name: ClassVar[str] = "store-updated"

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready form, as shipped to realtime listeners."""
        return {"event": self.name, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class CartUpdated(StoreEvent):
    name: ClassVar[str] = CART_UPDATED


@dataclass(frozen=True)
class WishlistUpdated(StoreEvent):
    name: ClassVar[str] = WISHLIST_UPDATED


E = TypeVar("E", bound=StoreEvent)
Listener = Callable[[E], None]


class EventBus:
    """Synchronous publish/subscribe for store events."""

    def __init__(self) -> None:
        self._listeners: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type[E], listener: Listener) -> Callable[[], None]:
        """
        Register a listener for one event type.

        Returns:
            A callable that removes the listener again
        """
        self._listeners[event_type].append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, listener)

        return unsubscribe

    def unsubscribe(self, event_type: type[E], listener: Listener) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: type[E]) -> int:
        return len(self._listeners.get(event_type, ()))

    def publish(self, event: StoreEvent) -> None:
        """
        Deliver an event to every listener registered for its type.

        A listener that raises is logged and skipped; the publisher never
        sees the exception.
        """
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners.get(type(event), ())):
            try:
                listener(event)
            except Exception as e:
                logger.error("Listener for %s failed: %s", event.name, type(e).__name__, exc_info=True)
