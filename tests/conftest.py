"""Pytest configuration and fixtures"""
import os
from unittest.mock import Mock

import pytest

# Set test environment variables before storefront.config is imported
os.environ["STOREFRONT_STORAGE"] = "memory"
os.environ["REALTIME_ENABLED"] = "false"
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("CATALOG_API_URL", "http://catalog.test")

from storefront.cart import CartLineItem, CartStore, Warranty  # noqa: E402
from storefront.events import EventBus  # noqa: E402
from storefront.storage import MemoryStorage  # noqa: E402
from storefront.wishlist import WishlistItem, WishlistStore  # noqa: E402


class BrokenStorage:
    """Storage whose every call fails, like disabled or full local storage."""

    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def delete(self, key):
        raise OSError("storage disabled")

    def keys(self):
        raise OSError("storage disabled")


@pytest.fixture
def storage():
    """Empty in-process storage"""
    return MemoryStorage()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def cart_store(storage, bus):
    return CartStore(storage, bus)


@pytest.fixture
def wishlist_store(storage, bus):
    return WishlistStore(storage, bus)


@pytest.fixture
def broken_storage():
    return BrokenStorage()


@pytest.fixture
def mouse():
    """Sample cart line item"""
    return CartLineItem(id="P1", slug="p1", name="Mouse", price=500, image="/m.png")


@pytest.fixture
def laptop():
    """Sample configurable product with a warranty"""
    return CartLineItem(
        id="L1",
        slug="ultrabook-14",
        name="Ultrabook 14",
        price=1000,
        image="/l.png",
        color="silver",
        selected_ram="16GB",
        selected_storage="512GB",
        warranty=Warranty(duration="1y", price=100),
    )


@pytest.fixture
def sample_wishlist_item():
    return WishlistItem(
        id="W1",
        slug="keyboard",
        name="Mechanical Keyboard",
        price=2499,
        image="/k.png",
        description="Hot-swappable switches",
    )


@pytest.fixture
def mock_redis():
    """Mock Upstash Redis client"""
    redis = Mock()
    redis.get.return_value = None
    redis.set.return_value = True
    redis.delete.return_value = 1
    redis.keys.return_value = []
    redis.xadd.return_value = "1700000000000-0"
    return redis
