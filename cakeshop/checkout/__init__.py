"""Checkout: order payload translation and order placement."""
from .service import (
    DELIVERY_FEE,
    FREE_DELIVERY_THRESHOLD,
    CheckoutDetails,
    CheckoutService,
    DeliveryAddress,
    build_order_payload,
    delivery_date_for,
    delivery_fee,
)

__all__ = [
    "DELIVERY_FEE",
    "FREE_DELIVERY_THRESHOLD",
    "CheckoutDetails",
    "CheckoutService",
    "DeliveryAddress",
    "build_order_payload",
    "delivery_date_for",
    "delivery_fee",
]
