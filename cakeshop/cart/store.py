"""
Cart store: the authoritative per-session CartState plus its Redis mirror.

Each dispatch is one step: apply the transition, then persist. A failed
write is logged by CartStorage and never rolls back the in-memory state.

Sync endpoints run in a threadpool, so a store serializes its dispatches
behind `lock` and the provider guards its registry the same way.
"""
import os
import threading
from collections import OrderedDict
from typing import Any, Mapping, Optional

from cakeshop.errors import CartProviderMissingError
from cakeshop.logging import get_logger, session_tag

from .actions import AddAddon, AddItem, CartAction, ClearCart, RemoveItem, UpdateItem, UpdateQuantity
from .models import Addon, CartLineItem, CartState
from .reducer import apply
from .storage import CartStorage

logger = get_logger(__name__)

# Sessions kept in memory; older ones are reloaded from Redis on demand
STORE_CACHE_SIZE = int(os.environ.get("CART_STORE_CACHE_SIZE", "1024"))


class CartStore:
    """Single writer for one cart session."""

    def __init__(self, session_id: str, storage: CartStorage):
        self.session_id = session_id
        self.storage = storage
        # Reentrant: checkout holds it across snapshot, order and clear
        self.lock = threading.RLock()
        self._state = storage.read(session_id)
        logger.debug(
            f"Cart {session_tag(session_id)} restored with "
            f"{len(self._state.items)} line(s)"
        )

    @property
    def state(self) -> CartState:
        return self._state

    def dispatch(self, action: CartAction) -> CartState:
        """Apply an action, persist the result and return the new state."""
        with self.lock:
            self._state = apply(self._state, action)

            if isinstance(action, ClearCart):
                self.storage.delete(self.session_id)
            else:
                self.storage.write(self.session_id, self._state)
            return self._state

    # Convenience wrappers

    def add_item(self, item: CartLineItem) -> CartState:
        return self.dispatch(AddItem(item))

    def remove_item(self, item_id: int) -> CartState:
        return self.dispatch(RemoveItem(item_id))

    def update_quantity(self, item_id: int, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(item_id, quantity))

    def update_item(self, item_id: int, updates: Mapping[str, Any]) -> CartState:
        return self.dispatch(UpdateItem(item_id, dict(updates)))

    def add_addon(self, item_id: int, addon: Addon, quantity: int = 1) -> CartState:
        return self.dispatch(AddAddon(item_id, addon, quantity))

    def clear(self) -> CartState:
        return self.dispatch(ClearCart())

    def snapshot(self) -> dict:
        """Current {items, total, itemCount} for checkout and UI."""
        return self._state.to_dict()


class CartProvider:
    """
    Root-constructed registry of cart stores, one per session.

    Install one on the application at startup and hand it to consumers.
    At most `max_stores` sessions stay in memory (least recently used are
    dropped first); an evicted session is restored from Redis on next use.
    """

    def __init__(self, storage: Optional[CartStorage] = None, max_stores: int = STORE_CACHE_SIZE):
        if max_stores < 1:
            raise ValueError("max_stores must be at least 1")
        self.storage = storage or CartStorage()
        self.max_stores = max_stores
        self._stores: OrderedDict[str, CartStore] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._stores

    def get_store(self, session_id: str) -> CartStore:
        with self._lock:
            store = self._stores.get(session_id)
            if store is None:
                store = CartStore(session_id, self.storage)
                self._stores[session_id] = store
                while len(self._stores) > self.max_stores:
                    evicted, _ = self._stores.popitem(last=False)
                    logger.debug(f"Cart {session_tag(evicted)} evicted from memory")
            else:
                self._stores.move_to_end(session_id)
            return store

    def forget(self, session_id: str) -> None:
        """Drop the in-memory store; the Redis slot is left as is."""
        with self._lock:
            self._stores.pop(session_id, None)


def require_cart_provider(app_state: Any) -> CartProvider:
    """Return the provider installed on `app_state` or fail loudly."""
    provider = getattr(app_state, "cart_provider", None)
    if not isinstance(provider, CartProvider):
        raise CartProviderMissingError()
    return provider
