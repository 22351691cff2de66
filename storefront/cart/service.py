"""Cart store over a session's key-value storage."""
from typing import Callable, Optional

from storefront.db import StorageKeys
from storefront.events import CartUpdated, EventBus
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from storefront.money import add, subtract
from storefront.storage import KeyValueStorage
from .models import CartLineItem, IdentityKey, Warranty, identity_key
from .storage import read_items, write_items

logger = get_logger(__name__)


def _find(items: list[CartLineItem], key: IdentityKey) -> int:
    return next((idx for idx, item in enumerate(items) if item.key == key), -1)


class CartStore:
    """
    Owns the persisted list of cart line items for one session.

    Every operation re-reads storage, so two stores over the same storage
    always agree; concurrent writers race with last-write-wins.

    Usage:
        store = CartStore(MemoryStorage(), EventBus())
        store.add_to_cart(item)
        store.update_qty("P1", 3)
        store.clear_cart()
    """

    def __init__(self, storage: KeyValueStorage, events: Optional[EventBus] = None):
        self.storage = storage
        self.events = events or EventBus()

    def _save(self, items: list[CartLineItem]) -> None:
        if write_items(self.storage, items):
            self.events.publish(CartUpdated(items=tuple(item.copy() for item in items)))

    def subscribe(self, listener: Callable[[CartUpdated], None]) -> Callable[[], None]:
        """Register for CartUpdated; returns the unsubscribe callable."""
        return self.events.subscribe(CartUpdated, listener)

    def get_cart(self) -> list[CartLineItem]:
        """Current cart; empty if storage is absent, corrupt or unavailable."""
        return read_items(self.storage)

    def item_count(self) -> int:
        """Total units in the cart, as shown on the navigation badge."""
        return sum(item.quantity for item in self.get_cart())

    def add_to_cart(self, item: CartLineItem) -> CartLineItem:
        """
        Add one unit of a product configuration.

        An existing line with the same identity key gets its quantity bumped
        by one; otherwise a new line with quantity 1 is appended. The
        incoming item's quantity is ignored.

        Returns:
            The resulting line item
        """
        items = self.get_cart()
        idx = _find(items, item.key)

        if idx >= 0:
            items[idx].quantity = (items[idx].quantity or 1) + 1
            line = items[idx]
        else:
            line = item.copy(quantity=1)
            items.append(line)

        self._save(items)
        logger.debug(f"Added {sanitize_id_for_logging(item.id)} to cart, qty={line.quantity}")
        return line

    def update_qty(
        self,
        id: str,
        quantity: int,
        color: Optional[str] = None,
        selected_ram: Optional[str] = None,
        selected_storage: Optional[str] = None,
        warranty: Optional[Warranty] = None,
    ) -> bool:
        """
        Set the quantity of a line item; zero or less removes it.

        The value is stored verbatim. Checking it against live stock is up to
        the caller.

        Returns:
            False if no line item matched (nothing written, nothing published)
        """
        items = self.get_cart()
        idx = _find(items, identity_key(id, color, selected_ram, selected_storage, warranty))
        if idx < 0:
            logger.debug(f"update_qty: {sanitize_id_for_logging(id)} not in cart")
            return False

        if quantity <= 0:
            items.pop(idx)
        else:
            items[idx].quantity = quantity

        self._save(items)
        return True

    def remove_from_cart(
        self,
        id: str,
        color: Optional[str] = None,
        selected_ram: Optional[str] = None,
        selected_storage: Optional[str] = None,
        warranty: Optional[Warranty] = None,
    ) -> bool:
        """
        Remove a line item.

        Persists and publishes even when nothing matched, so repeated calls
        leave the same state.

        Returns:
            True if a line item was removed
        """
        key = identity_key(id, color, selected_ram, selected_storage, warranty)
        items = self.get_cart()
        remaining = [item for item in items if item.key != key]
        self._save(remaining)
        return len(remaining) != len(items)

    def clear_cart(self) -> None:
        """Empty the cart and drop any applied promo code."""
        # Promo goes first so listeners of the clear event see it gone
        self.clear_promo_code()
        self._save([])

    def apply_promo_code(self, code: str) -> None:
        """Remember the promo code applied at checkout."""
        try:
            self.storage.set(StorageKeys.APPLIED_PROMO, code)
        except Exception as e:
            logger.error(f"Failed to persist promo code: {e}", exc_info=True)
            return
        logger.info(f"Applied promo code {sanitize_string_for_logging(code, 20)}")

    def get_applied_promo(self) -> Optional[str]:
        try:
            return self.storage.get(StorageKeys.APPLIED_PROMO)
        except Exception as e:
            logger.warning(f"Promo storage unavailable: {e}")
            return None

    def clear_promo_code(self) -> None:
        """Drop the applied promo code; the cart itself is untouched."""
        try:
            self.storage.delete(StorageKeys.APPLIED_PROMO)
        except Exception as e:
            logger.error(f"Failed to clear promo code: {e}", exc_info=True)

    def update_warranty(
        self,
        id: str,
        new_warranty: Optional[Warranty],
        color: Optional[str] = None,
        selected_ram: Optional[str] = None,
        selected_storage: Optional[str] = None,
        current_warranty: Optional[Warranty] = None,
    ) -> bool:
        """
        Swap the warranty on a line item and re-price it.

        The line is looked up by `current_warranty`. Its price becomes
        `price - current_warranty.price + new_warranty.price`, with either
        term dropped when that warranty is absent. If another line already
        has the resulting identity key, this line's quantity is merged into it.

        Returns:
            False if no line item matched
        """
        items = self.get_cart()
        idx = _find(items, identity_key(id, color, selected_ram, selected_storage, current_warranty))
        if idx < 0:
            logger.debug(f"update_warranty: {sanitize_id_for_logging(id)} not in cart")
            return False

        item = items[idx]
        base_price = subtract(item.price, current_warranty.price) if current_warranty else item.price
        new_price = add(base_price, new_warranty.price) if new_warranty else base_price
        updated = item.copy(warranty=new_warranty, price=new_price)

        # The new warranty may land on a configuration already in the cart
        existing = _find(items, updated.key)
        if existing >= 0 and existing != idx:
            items[existing].quantity = (items[existing].quantity or 1) + (item.quantity or 1)
            items.pop(idx)
        else:
            items[idx] = updated

        self._save(items)
        return True
