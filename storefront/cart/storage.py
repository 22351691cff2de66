"""JSON persistence for cart line items."""
import json
from typing import Optional

from storefront.db import StorageKeys
from storefront.logging import get_logger
from storefront.storage import KeyValueStorage
from .models import CartLineItem

logger = get_logger(__name__)


def read_items(storage: KeyValueStorage, key: str = StorageKeys.CART) -> list[CartLineItem]:
    """
    Load the persisted cart.

    Unavailable storage, malformed JSON or a non-list value read as an
    empty cart. Individual entries that cannot be parsed are dropped.
    """
    try:
        raw: Optional[str] = storage.get(key)
    except Exception as e:
        logger.warning(f"Cart storage unavailable, treating cart as empty: {e}")
        return []

    if not raw:
        return []

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Corrupted cart data, treating cart as empty: {e}")
        return []

    if not isinstance(data, list):
        logger.warning("Corrupted cart data: expected a list, got %s", type(data).__name__)
        return []

    items = []
    for entry in data:
        try:
            items.append(CartLineItem.from_dict(entry))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed cart entry: {e}")
    return items


def write_items(storage: KeyValueStorage, items: list[CartLineItem], key: str = StorageKeys.CART) -> bool:
    """
    Persist the full cart.

    Returns:
        True if saved, False if the backend rejected the write
    """
    try:
        storage.set(key, json.dumps([item.to_dict() for item in items]))
        return True
    except Exception as e:
        logger.error(f"Failed to persist cart: {e}", exc_info=True)
        return False
