"""Pytest configuration and fixtures"""
import os
import pytest
from decimal import Decimal
from unittest.mock import Mock

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("ORDERS_API_URL", "https://orders.test")

from cakeshop.cart import Addon, AddonLine, Cake, CartLineItem, CartProvider, CartStorage, CartStore


class FakeRedis:
    """Dict-backed stand-in for the Upstash client (get/set/delete only)."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def fake_redis():
    """In-memory Redis"""
    return FakeRedis()


@pytest.fixture
def failing_redis():
    """Redis client whose every call fails"""
    client = Mock()
    client.get.side_effect = ConnectionError("redis down")
    client.set.side_effect = ConnectionError("quota exceeded")
    client.delete.side_effect = ConnectionError("redis down")
    return client


@pytest.fixture
def storage(fake_redis):
    return CartStorage(redis=fake_redis)


@pytest.fixture
def store(storage):
    return CartStore("session-123", storage)


@pytest.fixture
def provider(storage):
    return CartProvider(storage)


@pytest.fixture
def sample_cake():
    """Sample catalog cake"""
    return Cake(
        id=1,
        name="Chocolate Truffle",
        base_price=Decimal("500"),
        slug="chocolate-truffle",
        images=["/img/truffle.jpg"],
        flavors=["chocolate", "vanilla"],
        weights=[{"weight": "1kg", "price": 500}, {"weight": "2kg", "price": 950}],
    )


@pytest.fixture
def other_cake():
    return Cake(
        id=2,
        name="Red Velvet",
        base_price=Decimal("650"),
        flavors=["red velvet"],
        weights=[{"weight": "1kg", "price": 650}],
    )


@pytest.fixture
def sample_addon():
    """Sample add-on, price as the catalog sends it"""
    return Addon(id=9, name="Candles", price="50", category="candles")


@pytest.fixture
def make_item(sample_cake):
    """Factory for candidate line items"""

    def _make(cake=None, quantity=1, weight="1kg", flavor="vanilla", unit_price="500", **kwargs):
        return CartLineItem(
            cake=cake or sample_cake,
            quantity=quantity,
            weight=weight,
            flavor=flavor,
            unit_price=Decimal(unit_price),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_cake_payload():
    """Cake as the catalog API returns it"""
    return {
        "id": 1,
        "name": "Chocolate Truffle",
        "slug": "chocolate-truffle",
        "basePrice": "500.00",
        "images": ["/img/truffle.jpg"],
        "flavors": ["chocolate", "vanilla"],
        "weights": [{"weight": "1kg", "price": 500}, {"weight": "2kg", "price": 950}],
        "isPhotoCake": False,
        "rating": "4.50",
    }
