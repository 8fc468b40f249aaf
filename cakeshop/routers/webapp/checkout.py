"""
WebApp Checkout Router

Places an order for the session's cart and clears it once the orders API
confirms.
"""
from fastapi import APIRouter, Depends, HTTPException

from cakeshop.cart import CartStore
from cakeshop.checkout import CheckoutDetails, CheckoutService, DeliveryAddress
from cakeshop.errors import EmptyCartError, OrderCreationError
from cakeshop.logging import get_logger
from cakeshop.routers.deps import get_cart_store, get_checkout_service
from .models import CheckoutRequest

logger = get_logger(__name__)

router = APIRouter(tags=["webapp-checkout"])


@router.post("/checkout")
def checkout(
    request: CheckoutRequest,
    store: CartStore = Depends(get_cart_store),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Create an order from the cart."""
    details = CheckoutDetails(
        address=DeliveryAddress(**request.address.model_dump()),
        delivery_time=request.delivery_time,
        payment_method=request.payment_method,
        special_instructions=request.special_instructions,
        delivery_occasion=request.delivery_occasion,
        sender_name=request.sender_name,
    )

    try:
        order = service.place_order(store, details)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderCreationError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"order": order, "cart": store.snapshot()}
