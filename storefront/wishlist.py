"""Wishlist Store.

Saved-for-later products, persisted next to the cart under the `wishlist`
key and announced through `WishlistUpdated` events. Unlike the cart, an
entry is identified by product id alone and has no quantity.
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from storefront.cart import CartLineItem, CartStore
from storefront.db import StorageKeys
from storefront.events import EventBus, WishlistUpdated
from storefront.logging import get_logger
from storefront.money import to_decimal, to_json_number
from storefront.storage import KeyValueStorage

logger = get_logger(__name__)


@dataclass
class WishlistItem:
    """Wishlist item."""

    id: str
    slug: str
    name: str
    price: Decimal
    image: str
    description: Optional[str] = None

    def __post_init__(self) -> None:
        self.price = to_decimal(self.price)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "price": to_json_number(self.price),
            "image": self.image,
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WishlistItem":
        return cls(
            id=str(data["id"]),
            slug=data.get("slug", ""),
            name=data.get("name", ""),
            price=to_decimal(data.get("price")),
            image=data.get("image", ""),
            description=data.get("description"),
        )

    def to_cart_item(self) -> CartLineItem:
        return CartLineItem(
            id=self.id,
            slug=self.slug,
            name=self.name,
            price=self.price,
            image=self.image,
        )


class WishlistStore:
    """Wishlist store over a session's storage.

    Same failure model as the cart: unreadable storage is an empty
    wishlist, failed writes are logged and not announced.
    """

    def __init__(self, storage: KeyValueStorage, events: Optional[EventBus] = None) -> None:
        self.storage = storage
        self.events = events or EventBus()

    def _read(self) -> list[WishlistItem]:
        try:
            raw = self.storage.get(StorageKeys.WISHLIST)
            data = json.loads(raw) if raw else []
        except Exception as e:
            logger.warning("Wishlist unreadable, treating as empty: %s", type(e).__name__)
            return []
        if not isinstance(data, list):
            return []

        items = []
        for entry in data:
            try:
                items.append(WishlistItem.from_dict(entry))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed wishlist entry")
        return items

    def _write(self, items: list[WishlistItem]) -> None:
        try:
            self.storage.set(StorageKeys.WISHLIST, json.dumps([item.to_dict() for item in items]))
        except Exception as e:
            logger.error("Failed to persist wishlist: %s", type(e).__name__, exc_info=True)
            return
        self.events.publish(WishlistUpdated(items=tuple(items)))

    def get_wishlist(self) -> list[WishlistItem]:
        return self._read()

    def is_in_wishlist(self, id: str) -> bool:
        return any(item.id == id for item in self._read())

    def add_to_wishlist(self, item: WishlistItem) -> bool:
        """Add a product; returns False (and writes nothing) if it is already saved."""
        items = self._read()
        if any(existing.id == item.id for existing in items):
            return False
        items.append(item)
        self._write(items)
        return True

    def remove_from_wishlist(self, id: str) -> bool:
        """Remove a product; persists and notifies even if it was not saved.

        Returns:
            True if an entry was removed
        """
        items = self._read()
        remaining = [item for item in items if item.id != id]
        self._write(remaining)
        return len(remaining) != len(items)

    def toggle_wishlist(self, item: WishlistItem) -> bool:
        """Add the product if missing, remove it otherwise.

        Returns:
            True if the product is now in the wishlist
        """
        if self.is_in_wishlist(item.id):
            self.remove_from_wishlist(item.id)
            return False
        return self.add_to_wishlist(item)

    def clear_wishlist(self) -> None:
        self._write([])

    def add_to_cart(self, id: str, cart: CartStore) -> Optional[CartLineItem]:
        """Put one unit of a saved product in the cart; the wishlist keeps it.

        Returns:
            The resulting cart line, or None if the product is not in the wishlist
        """
        item = next((entry for entry in self._read() if entry.id == id), None)
        if item is None:
            return None
        return cart.add_to_cart(item.to_cart_item())
