"""
Catalog Client - live stock levels from the product API.

The cart page fetches these before deciding which lines are out of stock
and whether "+" may add another unit.
"""
from typing import Optional

import httpx

from storefront import config
from storefront.errors import CatalogUnavailable, ERROR_CATALOG_UNAVAILABLE
from storefront.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """Thin wrapper around `GET {base_url}/api/products`."""

    def __init__(self, base_url: str = config.CATALOG_API_URL, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=config.CATALOG_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._client.close()

    def fetch_stock_levels(self) -> dict[str, int]:
        """
        Current stock per product id.

        Returns:
            Mapping of product id to available quantity

        Raises:
            CatalogUnavailable: If the API is unreachable or returns an unexpected shape
        """
        try:
            response = self._client.get(f"{self.base_url}/api/products")
            response.raise_for_status()
            products = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching stock levels: {e}")
            raise CatalogUnavailable(ERROR_CATALOG_UNAVAILABLE) from e

        if not isinstance(products, list):
            logger.error("Unexpected catalog payload: %s", type(products).__name__)
            raise CatalogUnavailable(ERROR_CATALOG_UNAVAILABLE)

        stock = {}
        for product in products:
            if not isinstance(product, dict) or "id" not in product:
                continue
            try:
                stock[str(product["id"])] = int(product.get("quantity") or 0)
            except (TypeError, ValueError):
                stock[str(product["id"])] = 0
        return stock
