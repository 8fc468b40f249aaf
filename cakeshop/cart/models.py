"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Tuple

from cakeshop.services.money import ZERO, multiply, round_money, to_decimal, to_str


@dataclass(frozen=True)
class Cake:
    """Catalog cake snapshot. Owned by the catalog, borrowed by the cart."""
    id: int
    name: str
    base_price: Decimal = ZERO
    slug: str = ""
    images: Tuple[str, ...] = ()
    flavors: Tuple[str, ...] = ()
    weights: Tuple[dict, ...] = ()  # ({"weight": "1kg", "price": 650}, ...)
    is_photo_cake: bool = False

    def __post_init__(self):
        object.__setattr__(self, "base_price", to_decimal(self.base_price))
        object.__setattr__(self, "images", tuple(self.images))
        object.__setattr__(self, "flavors", tuple(self.flavors))
        object.__setattr__(self, "weights", tuple(dict(w) for w in self.weights))

    def price_for(self, weight: Optional[str]) -> Decimal:
        """Price of the given weight variant; first variant, then base price as fallbacks."""
        for variant in self.weights:
            if variant.get("weight") == weight:
                return to_decimal(variant.get("price"))
        if self.weights:
            return to_decimal(self.weights[0].get("price"))
        return self.base_price

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "basePrice": str(self.base_price),
            "images": list(self.images),
            "flavors": list(self.flavors),
            "weights": [dict(w) for w in self.weights],
            "isPhotoCake": self.is_photo_cake,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cake":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            base_price=to_decimal(data.get("basePrice", data.get("base_price"))),
            slug=data.get("slug") or "",
            images=data.get("images") or (),
            flavors=data.get("flavors") or (),
            weights=data.get("weights") or (),
            is_photo_cake=bool(data.get("isPhotoCake", data.get("is_photo_cake", False))),
        )


@dataclass(frozen=True)
class Addon:
    """Catalog add-on snapshot (candles, cards, balloons...). Price travels as a string."""
    id: int
    name: str
    price: str = "0"
    category: Optional[str] = None
    images: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "price", str(self.price))
        object.__setattr__(self, "images", tuple(self.images))

    @property
    def unit_price(self) -> Decimal:
        """Parsed price; unparseable values count as zero."""
        return to_decimal(self.price)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "images": list(self.images),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Addon":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            price=data.get("price", "0"),
            category=data.get("category"),
            images=data.get("images") or (),
        )


@dataclass(frozen=True)
class AddonLine:
    """An add-on attached to one line item, with its own quantity."""
    addon: Addon
    quantity: int

    @property
    def total_price(self) -> Decimal:
        return multiply(self.addon.unit_price, self.quantity)

    def to_dict(self) -> dict:
        return {"addon": self.addon.to_dict(), "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict) -> "AddonLine":
        return cls(addon=Addon.from_dict(data["addon"]), quantity=int(data["quantity"]))


@dataclass(frozen=True)
class CartLineItem:
    """
    Single line in the cart: cake + variant + personalization + add-ons.

    `id` is None on a candidate until the cart assigns one.
    `unit_price` is a snapshot taken when the cake was added.
    """
    cake: Cake
    quantity: int
    weight: str
    flavor: str
    unit_price: Decimal
    id: Optional[int] = None
    custom_message: Optional[str] = None
    custom_image: Optional[str] = None
    personalization: Optional[dict] = None
    addons: Tuple[AddonLine, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        object.__setattr__(self, "addons", tuple(self.addons))

    @property
    def merge_key(self) -> tuple:
        return (self.cake.id, self.weight, self.flavor)

    @property
    def addons_total(self) -> Decimal:
        return sum((line.total_price for line in self.addons), ZERO)

    @property
    def total_price(self) -> Decimal:
        """Cake units plus the add-ons attached to this line."""
        return multiply(self.unit_price, self.quantity) + self.addons_total

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cake": self.cake.to_dict(),
            "quantity": self.quantity,
            "weight": self.weight,
            "flavor": self.flavor,
            "customMessage": self.custom_message,
            "customImage": self.custom_image,
            "personalization": self.personalization,
            "price": str(self.unit_price),
            "addons": [line.to_dict() for line in self.addons],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        item_id = data.get("id")
        return cls(
            id=int(item_id) if item_id is not None else None,
            cake=Cake.from_dict(data["cake"]),
            quantity=int(data["quantity"]),
            weight=str(data["weight"]),
            flavor=str(data["flavor"]),
            unit_price=to_decimal(data.get("price", data.get("unitPrice"))),
            custom_message=data.get("customMessage"),
            custom_image=data.get("customImage"),
            personalization=data.get("personalization", data.get("photoCustomization")),
            addons=[AddonLine.from_dict(line) for line in data.get("addons") or []],
        )


@dataclass(frozen=True)
class CartState:
    """
    The cart ledger. `total` and `item_count` are derived from `items`;
    build instances through `empty()` or `from_items()`.
    """
    items: Tuple[CartLineItem, ...] = ()
    total: Decimal = Decimal("0.00")
    item_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "total", round_money(self.total))

    @classmethod
    def empty(cls) -> "CartState":
        return cls()

    @classmethod
    def from_items(cls, items) -> "CartState":
        from .reducer import compute_totals

        items = tuple(items)
        totals = compute_totals(items)
        return cls(items=items, total=totals.total, item_count=totals.item_count)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: int) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Persisted/snapshot layout: {items, total, itemCount}."""
        return {
            "items": [item.to_dict() for item in self.items],
            "total": to_str(self.total),
            "itemCount": self.item_count,
        }
