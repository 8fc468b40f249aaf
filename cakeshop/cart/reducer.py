"""
Cart reducer - pure transitions over CartState.

apply(state, action) never mutates `state` and always returns a new
CartState with aggregates recomputed from scratch. Actions that target a
missing line item return a value-equal copy.
"""
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional

from cakeshop.logging import get_logger
from cakeshop.services.money import ZERO, round_money

from .actions import AddAddon, AddItem, CartAction, ClearCart, RemoveItem, UpdateItem, UpdateQuantity
from .models import AddonLine, CartLineItem, CartState

logger = get_logger(__name__)

# Fields UpdateItem may patch. `id` is owned by the cart.
PATCHABLE_FIELDS = frozenset({
    "cake",
    "quantity",
    "weight",
    "flavor",
    "unit_price",
    "custom_message",
    "custom_image",
    "personalization",
    "addons",
})


class Totals(NamedTuple):
    total: Decimal
    item_count: int


def compute_totals(items: Iterable[CartLineItem]) -> Totals:
    """
    Recompute cart aggregates.

    item_count counts units, not lines. Each line contributes
    unit_price * quantity plus its attached add-ons (addon price * addon quantity).
    """
    total = ZERO
    item_count = 0
    for item in items:
        item_count += item.quantity
        total += item.total_price
    return Totals(total=round_money(total), item_count=item_count)


def next_item_id(items: Iterable[CartLineItem]) -> int:
    """Fresh line id: one past the largest id currently held."""
    return max((item.id for item in items if item.id is not None), default=0) + 1


def _positive_addons(addons: Iterable[AddonLine]) -> tuple:
    return tuple(line for line in addons if line.quantity >= 1)


def _add_item(items: tuple, candidate: CartLineItem) -> tuple:
    if candidate.quantity < 1:
        return items

    for index, existing in enumerate(items):
        if existing.merge_key == candidate.merge_key:
            # Merge bumps quantity only; the existing personalization and add-ons win
            merged = replace(existing, quantity=existing.quantity + candidate.quantity)
            return items[:index] + (merged,) + items[index + 1:]

    new_item = replace(
        candidate,
        id=next_item_id(items),
        addons=_positive_addons(candidate.addons),
    )
    return items + (new_item,)


def _update_quantity(items: tuple, item_id: int, quantity: int) -> tuple:
    updated = (
        replace(item, quantity=max(0, quantity)) if item.id == item_id else item
        for item in items
    )
    return tuple(item for item in updated if item.quantity > 0)


def _update_item(items: tuple, item_id: int, updates) -> tuple:
    target = next((item for item in items if item.id == item_id), None)
    if target is None:
        return items

    patch = {key: value for key, value in dict(updates).items() if key in PATCHABLE_FIELDS}
    ignored = set(dict(updates)) - set(patch)
    if ignored:
        logger.debug("UpdateItem ignored fields: %s", sorted(ignored))
    if "addons" in patch:
        patch["addons"] = _positive_addons(patch["addons"])

    patched = replace(target, **patch)
    if patched.quantity < 1:
        return tuple(item for item in items if item.id != item_id)

    if any(item.id != item_id and item.merge_key == patched.merge_key for item in items):
        logger.info("UpdateItem on line %s would duplicate another line, skipped", item_id)
        return items

    return tuple(patched if item.id == item_id else item for item in items)


def _add_addon(items: tuple, item_id: int, addon, quantity: int) -> tuple:
    if quantity < 1:
        return items

    result = []
    for item in items:
        if item.id != item_id:
            result.append(item)
            continue

        addons = list(item.addons)
        existing_index: Optional[int] = next(
            (i for i, line in enumerate(addons) if line.addon.id == addon.id),
            None,
        )
        if existing_index is not None:
            line = addons[existing_index]
            addons[existing_index] = replace(line, quantity=line.quantity + quantity)
        else:
            addons.append(AddonLine(addon=addon, quantity=quantity))
        result.append(replace(item, addons=tuple(addons)))
    return tuple(result)


def apply(state: CartState, action: CartAction) -> CartState:
    """Apply one action and return the next cart state."""
    items = state.items

    if isinstance(action, AddItem):
        items = _add_item(items, action.item)
    elif isinstance(action, RemoveItem):
        items = tuple(item for item in items if item.id != action.item_id)
    elif isinstance(action, UpdateQuantity):
        items = _update_quantity(items, action.item_id, action.quantity)
    elif isinstance(action, UpdateItem):
        items = _update_item(items, action.item_id, action.updates)
    elif isinstance(action, AddAddon):
        items = _add_addon(items, action.item_id, action.addon, action.quantity)
    elif isinstance(action, ClearCart):
        return CartState.empty()
    else:
        logger.warning("Unknown cart action %r ignored", action)

    return CartState.from_items(items)
