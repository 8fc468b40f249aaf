"""Cart actions dispatched through `cakeshop.cart.reducer.apply`."""
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .models import Addon, CartLineItem


@dataclass(frozen=True)
class AddItem:
    item: CartLineItem


@dataclass(frozen=True)
class RemoveItem:
    item_id: int


@dataclass(frozen=True)
class UpdateQuantity:
    item_id: int
    quantity: int


@dataclass(frozen=True)
class UpdateItem:
    item_id: int
    updates: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AddAddon:
    item_id: int
    addon: Addon
    quantity: int = 1


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, UpdateItem, AddAddon, ClearCart]
