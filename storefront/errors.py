"""
Common Error Constants

Centralized error messages shared by the stores and the HTTP routers.
"""

# Session errors
ERROR_SESSION_REQUIRED = "X-Session-Id header is required"

# Cart errors
ERROR_ITEM_NOT_IN_CART = "Item not found in cart"
ERROR_INVALID_PROMO_CODE = "Promo code must not be empty"

# Wishlist errors
ERROR_ITEM_NOT_IN_WISHLIST = "Item not found in wishlist"

# Catalog errors
ERROR_CATALOG_UNAVAILABLE = "Product catalog unavailable"

# Image errors
ERROR_INVALID_IMAGE_SOURCE = "Image source must be an http(s) URL"
ERROR_IMAGE_HOST_NOT_ALLOWED = "Image host is not allowed"

# Session errors
ERROR_INVALID_SESSION_ID = "X-Session-Id may only contain letters, digits, _ and -"


class CatalogUnavailable(Exception):
    """Raised when current stock levels cannot be fetched from the catalog API."""
