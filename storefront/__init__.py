"""Storefront client-state engine: cart, wishlist, storage and events."""

__version__ = "1.0.0"
