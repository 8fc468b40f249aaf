"""Cart package: models, reducer, storage, and store."""
from .actions import AddAddon, AddItem, CartAction, ClearCart, RemoveItem, UpdateItem, UpdateQuantity
from .models import Addon, AddonLine, Cake, CartLineItem, CartState
from .reducer import Totals, apply, compute_totals
from .storage import CartStorage, dump_state, load_state
from .store import CartProvider, CartStore, require_cart_provider

__all__ = [
    "AddAddon",
    "AddItem",
    "Addon",
    "AddonLine",
    "Cake",
    "CartAction",
    "CartLineItem",
    "CartProvider",
    "CartState",
    "CartStorage",
    "CartStore",
    "ClearCart",
    "RemoveItem",
    "Totals",
    "UpdateItem",
    "UpdateQuantity",
    "apply",
    "compute_totals",
    "dump_state",
    "load_state",
    "require_cart_provider",
]
