"""
Redis persistence for the cart.

The in-memory CartState is authoritative; the Redis slot is a best-effort
mirror. Reads never raise (anything unusable restores an empty cart) and
write/delete failures are logged and swallowed.
"""
import json
from dataclasses import replace
from decimal import DecimalException
from typing import Optional

from cakeshop.db import RedisKeys, TTL, get_redis
from cakeshop.logging import get_logger, session_tag

from .models import CartLineItem, CartState

logger = get_logger(__name__)


class MalformedCartError(ValueError):
    """Persisted cart payload has the wrong shape."""


def dump_state(state: CartState) -> str:
    """Serialize the full cart as JSON: {items, total, itemCount}."""
    return json.dumps(state.to_dict())


def _decode_items(payload) -> list[CartLineItem]:
    if not isinstance(payload, dict):
        raise MalformedCartError("cart payload is not an object")
    raw_items = payload.get("items")
    if not isinstance(raw_items, list):
        raise MalformedCartError("cart items is not a list")

    items = [CartLineItem.from_dict(raw) for raw in raw_items]
    # Zero-quantity leftovers are dropped, as UpdateQuantity would have done
    items = [
        replace(item, addons=[line for line in item.addons if line.quantity >= 1])
        for item in items
        if item.quantity >= 1
    ]

    ids = [item.id for item in items]
    if None in ids or len(set(ids)) != len(ids):
        raise MalformedCartError("cart item ids are missing or duplicated")
    keys = [item.merge_key for item in items]
    if len(set(keys)) != len(keys):
        raise MalformedCartError("cart contains duplicate line items")
    return items


def load_state(raw: Optional[str]) -> CartState:
    """
    Rebuild a CartState from its persisted form.

    Stored total/itemCount are ignored and recomputed from items.
    Returns an empty cart for missing or malformed data.
    """
    if not raw:
        return CartState.empty()

    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        items = _decode_items(json.loads(raw))
        return CartState.from_items(items)
    except (
        json.JSONDecodeError,
        UnicodeDecodeError,
        DecimalException,
        KeyError,
        TypeError,
        ValueError,
        AttributeError,
    ) as e:
        # Corrupted data - start over with an empty cart
        logger.warning(f"Discarding unreadable cart data: {e}")
        return CartState.empty()


class CartStorage:
    """Cart slot in Upstash Redis, one key per cart session."""

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def read(self, session_id: str) -> CartState:
        """Load the session's cart; any failure yields an empty cart."""
        key = RedisKeys.cart_key(session_id)
        try:
            raw = self.redis.get(key)
        except Exception as e:
            logger.warning(
                f"Failed to read cart {session_tag(session_id)} from Redis: {e}"
            )
            return CartState.empty()
        return load_state(raw)

    def write(self, session_id: str, state: CartState) -> bool:
        """Mirror the cart to Redis with TTL. Returns False on failure."""
        key = RedisKeys.cart_key(session_id)
        try:
            self.redis.set(key, dump_state(state), ex=self.ttl)
            return True
        except Exception as e:
            logger.error(
                f"Failed to save cart {session_tag(session_id)} to Redis: {e}"
            )
            return False

    def delete(self, session_id: str) -> bool:
        """Drop the session's slot. Returns False on failure."""
        key = RedisKeys.cart_key(session_id)
        try:
            self.redis.delete(key)
            return True
        except Exception as e:
            logger.error(
                f"Failed to clear cart {session_tag(session_id)} from Redis: {e}"
            )
            return False
