from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..time_utils import parse_iso_datetime, to_utc_z, utcnow
from ..validation import MAX_AMOUNT

PRICE_TIER_REGULAR = "regular"
PRICE_TIER_DISCOUNTED = "discounted"
PRICE_TIERS = frozenset({PRICE_TIER_REGULAR, PRICE_TIER_DISCOUNTED})


def stored_decimal(value: Any) -> Decimal:
    """
    Read a money value from a stored record.

    Written as a string (lossless); JSON numbers from older blobs are accepted.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"invalid decimal value: {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"invalid decimal value: {value!r}")
    if not result.is_finite() or abs(result) > MAX_AMOUNT:
        raise ValueError(f"invalid decimal value: {value!r}")
    return result


def stored_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid integer value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"invalid integer value: {value!r}")


def stored_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"invalid text value: {value!r}")
    return value


def stored_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    dt = parse_iso_datetime(value)
    if dt is None:
        raise ValueError("missing timestamp")
    return dt


@dataclass
class Product:
    """
    Tracked inventory item.

    stock is the remaining unit count; original_stock is the count at the last
    create/edit. stock <= original_stock holds at all times.
    """
    id: int
    name: str
    cost_price: Decimal
    selling_price: Decimal
    discounted_price: Decimal
    stock: int
    original_stock: int

    def price_for(self, tier: str) -> Decimal:
        if tier == PRICE_TIER_REGULAR:
            return self.selling_price
        if tier == PRICE_TIER_DISCOUNTED:
            return self.discounted_price
        raise ValueError(f"unknown price tier: {tier!r}")

    @property
    def sold_units(self) -> int:
        return self.original_stock - self.stock

    @property
    def stock_value(self) -> Decimal:
        """Cost of the units still on hand."""
        return self.cost_price * self.stock

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}/{self.original_stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "costPrice": str(self.cost_price),
            "sellingPrice": str(self.selling_price),
            "discountedPrice": str(self.discounted_price),
            "stock": self.stock,
            "originalStock": self.original_stock,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        stock = stored_int(data["stock"])
        # Blobs written before originalStock existed only carry stock
        original_stock = stored_int(data.get("originalStock", stock))
        if stock < 0 or stock > original_stock:
            raise ValueError(f"product {data.get('id')!r} has stock outside 0..originalStock")
        return cls(
            id=stored_int(data["id"]),
            name=stored_text(data["name"]),
            cost_price=stored_decimal(data["costPrice"]),
            selling_price=stored_decimal(data["sellingPrice"]),
            discounted_price=stored_decimal(data["discountedPrice"]),
            stock=stock,
            original_stock=original_stock,
        )


@dataclass(frozen=True)
class Sale:
    """Units of one product sold at a captured unit price. Never edited."""
    id: int
    product_id: int
    quantity: int
    price: Decimal
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "price": str(self.price),
            "timestamp": to_utc_z(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict, *, fallback_id: Optional[int] = None) -> "Sale":
        raw_id = data.get("id")
        if raw_id is None:
            if fallback_id is None:
                raise ValueError("sale record has no id")
            sale_id = fallback_id
        else:
            sale_id = stored_int(raw_id)
        # Records written by the browser client used "date"
        raw_timestamp = data["timestamp"] if "timestamp" in data else data["date"]
        return cls(
            id=sale_id,
            product_id=stored_int(data["productId"]),
            quantity=stored_int(data["quantity"]),
            price=stored_decimal(data["price"]),
            timestamp=stored_timestamp(raw_timestamp),
        )


@dataclass
class Expense:
    id: int
    category: str
    amount: Decimal
    description: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "amount": str(self.amount),
            "description": self.description,
            "timestamp": to_utc_z(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        description = data.get("description")
        return cls(
            id=stored_int(data["id"]),
            category=stored_text(data["category"]),
            amount=stored_decimal(data["amount"]),
            description=None if description is None else stored_text(description),
            timestamp=stored_timestamp(data["timestamp"]),
        )


@dataclass
class Customer:
    """Contact entry in the customer directory; not linked to sales."""
    id: int
    name: str
    email: str
    phone: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=stored_int(data["id"]),
            name=stored_text(data["name"]),
            email=stored_text(data["email"]),
            phone=stored_text(data["phone"]),
        )
