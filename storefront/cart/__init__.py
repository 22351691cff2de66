"""Cart package: models, persistence, store and stock checks."""
from .models import CartLineItem, IdentityKey, Warranty, identity_key
from .service import CartStore
from .stock import can_increment, find_stock_issues, is_out_of_stock

__all__ = [
    "CartLineItem",
    "IdentityKey",
    "Warranty",
    "identity_key",
    "CartStore",
    "can_increment",
    "find_stock_issues",
    "is_out_of_stock",
]
