"""
WebApp API Pydantic Models

Request bodies for the cart and checkout endpoints.
"""
from typing import Any
from pydantic import BaseModel, Field


# ==================== CART MODELS ====================

class AddonSelection(BaseModel):
    addon: dict[str, Any]  # catalog add-on snapshot: {id, name, price, ...}
    quantity: int = Field(1, ge=1)


class AddToCartRequest(BaseModel):
    cake: dict[str, Any]  # catalog cake snapshot: {id, name, basePrice, weights, ...}
    quantity: int = Field(1, ge=1)
    weight: str | None = None
    flavor: str | None = None
    price: float | str | None = None  # omitted = price of the selected weight
    custom_message: str | None = None
    custom_image: str | None = None
    personalization: dict[str, Any] | None = None
    addons: list[AddonSelection] = []


class UpdateCartItemRequest(BaseModel):
    item_id: int
    quantity: int = 1  # 0 or less removes the item


class UpdateCartItemDetailsRequest(BaseModel):
    item_id: int
    custom_message: str | None = None
    custom_image: str | None = None
    personalization: dict[str, Any] | None = None


class AddAddonRequest(BaseModel):
    item_id: int
    addon: dict[str, Any]
    quantity: int = Field(1, ge=1)


# ==================== CHECKOUT MODELS ====================

class DeliveryAddressRequest(BaseModel):
    name: str = Field(..., min_length=2)
    phone: str = Field(..., pattern=r"^[6-9]\d{9}$")
    address: str = Field(..., min_length=10)
    pincode: str = Field(..., pattern=r"^[1-9][0-9]{5}$")
    city: str = Field(..., min_length=2)
    landmark: str | None = None
    email: str | None = None


class CheckoutRequest(BaseModel):
    address: DeliveryAddressRequest
    delivery_time: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)
    special_instructions: str | None = None
    delivery_occasion: str | None = None
    sender_name: str | None = None
