"""Checkout Service - turns a cart snapshot into an order on the orders API.

The cart is cleared only after the orders API confirms the order.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

import httpx

from cakeshop.cart import CartState, CartStore
from cakeshop.errors import EmptyCartError, OrderCreationError
from cakeshop.logging import get_logger, session_tag
from cakeshop.services.money import ZERO, round_money, to_decimal, to_float, to_str

logger = get_logger(__name__)

FREE_DELIVERY_THRESHOLD = Decimal("500")
DELIVERY_FEE = Decimal("50")

ORDERS_API_URL = os.environ.get("ORDERS_API_URL", "http://localhost:5000")


@dataclass
class DeliveryAddress:
    name: str
    phone: str
    address: str
    pincode: str
    city: str
    landmark: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "pincode": self.pincode,
            "city": self.city,
            "landmark": self.landmark,
        }
        if self.email:
            data["email"] = self.email
        return data


@dataclass
class CheckoutDetails:
    """Everything the checkout form collects besides the cart."""
    address: DeliveryAddress
    delivery_time: str  # same-day, midnight, next-day
    payment_method: str  # upi, card, cod, phonepe
    special_instructions: Optional[str] = None
    delivery_occasion: Optional[str] = None
    sender_name: Optional[str] = None


def delivery_fee(subtotal: Any) -> Decimal:
    """Flat fee below the free-delivery threshold."""
    if to_decimal(subtotal) >= FREE_DELIVERY_THRESHOLD:
        return ZERO
    return DELIVERY_FEE


def delivery_date_for(delivery_time: str, now: Optional[datetime] = None) -> datetime:
    """Delivery date implied by the selected slot."""
    now = now or datetime.now(timezone.utc)
    if delivery_time == "midnight":
        return (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    if delivery_time == "next-day":
        return now + timedelta(days=1)
    return now


def _order_item(item) -> dict:
    return {
        "cakeId": item.cake.id,
        "name": item.cake.name,
        "quantity": item.quantity,
        "weight": item.weight,
        "flavor": item.flavor,
        "customMessage": item.custom_message,
        "customImage": item.custom_image,
        "photoCustomization": item.personalization,
        "price": to_float(item.unit_price),
        "addons": [
            {
                "id": line.addon.id,
                "name": line.addon.name,
                "price": to_float(line.addon.unit_price),
                "quantity": line.quantity,
            }
            for line in item.addons
        ],
    }


def build_order_payload(
    state: CartState,
    details: CheckoutDetails,
    now: Optional[datetime] = None,
) -> dict:
    """Translate cart lines into the order-creation payload."""
    subtotal = state.total
    fee = delivery_fee(subtotal)
    return {
        "items": [_order_item(item) for item in state.items],
        "subtotal": to_str(subtotal),
        "deliveryFee": to_str(fee),
        "total": to_str(round_money(subtotal + fee)),
        "deliveryAddress": details.address.to_dict(),
        "deliveryDate": delivery_date_for(details.delivery_time, now).isoformat(),
        "deliveryTime": details.delivery_time,
        "deliveryOccasion": details.delivery_occasion,
        "senderName": details.sender_name,
        "paymentMethod": details.payment_method,
        "specialInstructions": details.special_instructions,
        "status": "pending",
        "paymentStatus": "pending" if details.payment_method == "cod" else "paid",
    }


def _decode_order(response: httpx.Response) -> dict:
    """Orders API body as a dict; anything else becomes {}."""
    try:
        order = response.json()
    except ValueError:
        logger.warning(f"Orders API returned a non-JSON body ({response.status_code})")
        return {}
    if not isinstance(order, dict):
        logger.warning(f"Orders API returned {type(order).__name__} instead of an object")
        return {}
    return order


class CheckoutService:
    """Places orders for a cart session through the orders API."""

    def __init__(self, orders_api_url: Optional[str] = None, client: Optional[httpx.Client] = None):
        self.orders_api_url = (orders_api_url or ORDERS_API_URL).rstrip("/")
        # HTTP client (lazy init)
        self._http_client = client

    def _get_http_client(self) -> httpx.Client:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=10.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    def place_order(self, store: CartStore, details: CheckoutDetails) -> dict:
        """
        Create an order from the store's cart.

        Raises:
            EmptyCartError: the cart has no items
            OrderCreationError: the orders API rejected or could not be reached

        On success the cart is cleared and the orders API response is returned.
        The store stays locked until then, so no line added mid-request is lost.
        """
        session = session_tag(store.session_id)

        with store.lock:
            state = store.state
            if state.is_empty:
                raise EmptyCartError()

            payload = build_order_payload(state, details)
            client = self._get_http_client()

            try:
                response = client.post(f"{self.orders_api_url}/api/orders", json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"Orders API rejected order for cart {session}: {e.response.status_code}")
                raise OrderCreationError(status_code=e.response.status_code) from e
            except httpx.HTTPError as e:
                logger.error(f"Orders API unreachable for cart {session}: {e}")
                raise OrderCreationError() from e

            # The order exists from here on; an odd body must not keep the cart
            order = _decode_order(response)
            store.clear()

        logger.info(f"Order {order.get('orderNumber', 'N/A')} placed for cart {session}")
        return order

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None
