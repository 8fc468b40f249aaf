"""
WebApp Cart Router

Shopping cart endpoints. The cart session is named by the X-Cart-Session
header; every mutation returns the fresh cart.

Response format:
- items/total/itemCount mirror the persisted cart layout
- *_display fields are formatted for the UI
"""
from fastapi import APIRouter, Depends, HTTPException

from cakeshop.cart import Addon, AddonLine, Cake, CartLineItem, CartState, CartStore
from cakeshop.errors import ERROR_INVALID_REQUEST
from cakeshop.logging import get_logger
from cakeshop.routers.deps import get_cart_store
from cakeshop.services.money import format_money, to_decimal, to_float
from .models import AddAddonRequest, AddToCartRequest, UpdateCartItemDetailsRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["webapp-cart"])


def _format_cart_response(state: CartState) -> dict:
    """Cart snapshot plus per-line totals and display strings."""
    snapshot = state.to_dict()
    for raw, item in zip(snapshot["items"], state.items):
        raw["lineTotal"] = to_float(item.total_price)
        raw["lineTotal_display"] = format_money(item.total_price)
    snapshot["total_display"] = format_money(state.total)
    snapshot["isEmpty"] = state.is_empty
    return snapshot


def _parse_cake(data: dict) -> Cake:
    try:
        return Cake.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"{ERROR_INVALID_REQUEST}: cake {e}")


def _parse_addon(data: dict) -> Addon:
    try:
        return Addon.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"{ERROR_INVALID_REQUEST}: addon {e}")


def _build_line_item(request: AddToCartRequest) -> CartLineItem:
    """Candidate line: defaults to the cake's first weight/flavor, price snapshot taken now."""
    cake = _parse_cake(request.cake)
    weight = request.weight or (cake.weights[0].get("weight", "") if cake.weights else "")
    flavor = request.flavor or (cake.flavors[0] if cake.flavors else "")
    unit_price = to_decimal(request.price) if request.price is not None else cake.price_for(weight)

    return CartLineItem(
        cake=cake,
        quantity=request.quantity,
        weight=weight,
        flavor=flavor,
        unit_price=unit_price,
        custom_message=(request.custom_message or "").strip() or None,
        custom_image=request.custom_image,
        personalization=request.personalization,
        addons=[
            AddonLine(addon=_parse_addon(selection.addon), quantity=selection.quantity)
            for selection in request.addons
        ],
    )


@router.get("/cart")
def get_webapp_cart(store: CartStore = Depends(get_cart_store)):
    """Get the session's shopping cart."""
    return _format_cart_response(store.state)


@router.post("/cart/add")
def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add a cake to the cart (merges with an identical cake/weight/flavor line)."""
    item = _build_line_item(request)
    state = store.add_item(item)
    logger.info(f"Added cake {item.cake.id} x{item.quantity} ({item.weight}, {item.flavor}) to cart")
    return _format_cart_response(state)


@router.patch("/cart/item")
def update_cart_item(request: UpdateCartItemRequest, store: CartStore = Depends(get_cart_store)):
    """Update line quantity (0 = remove)."""
    return _format_cart_response(store.update_quantity(request.item_id, request.quantity))


@router.patch("/cart/item/details")
def update_cart_item_details(
    request: UpdateCartItemDetailsRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Edit personalization of a line (message, photo, layout)."""
    updates = request.model_dump(exclude_unset=True, exclude={"item_id"})
    return _format_cart_response(store.update_item(request.item_id, updates))


@router.post("/cart/item/addon")
def add_cart_item_addon(request: AddAddonRequest, store: CartStore = Depends(get_cart_store)):
    """Attach an add-on to a line (re-adding increments its quantity)."""
    addon = _parse_addon(request.addon)
    return _format_cart_response(store.add_addon(request.item_id, addon, request.quantity))


@router.delete("/cart/item")
def remove_cart_item(item_id: int, store: CartStore = Depends(get_cart_store)):
    """Remove a line from the cart."""
    return _format_cart_response(store.remove_item(item_id))


@router.delete("/cart")
def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Empty the cart."""
    return _format_cart_response(store.clear())
