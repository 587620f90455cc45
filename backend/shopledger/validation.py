from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .errors import ValidationError

"""
Form-level rules for products, expenses and customers.

validate_* functions are pure: they return a field -> message mapping (empty
when valid) and never touch ledger state. Every rule is evaluated; errors are
collected, not short-circuited. clean_* wraps validate_* and returns the
normalized values, raising ValidationError with the mapping on failure.

Field names match the stored record shape (camelCase).
"""

PRODUCT_FIELDS = ("name", "costPrice", "sellingPrice", "discountedPrice", "stock")
EXPENSE_FIELDS = ("category", "amount", "description")
CUSTOMER_FIELDS = ("name", "email", "phone")

# Upper bounds keep every derived total (price x units, summed) finite
MAX_AMOUNT = Decimal("999999999999")
MAX_STOCK = 999_999_999

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


@dataclass(frozen=True)
class ProductFields:
    name: str
    cost_price: Decimal
    selling_price: Decimal
    discounted_price: Decimal
    stock: int


@dataclass(frozen=True)
class ExpenseFields:
    category: str
    amount: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class CustomerFields:
    name: str
    email: str
    phone: str


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a price/amount input; None when missing, blank or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    try:
        result = Decimal(stripped)
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def parse_amount(value: Any) -> Optional[Decimal]:
    """A price or expense amount: greater than zero and at most MAX_AMOUNT."""
    parsed = parse_decimal(value)
    if parsed is None or parsed <= 0 or parsed > MAX_AMOUNT:
        return None
    return parsed


def parse_int(value: Any) -> Optional[int]:
    """
    Strict integer parsing for unit counts.

    Rejects bools, floats, decimal points and scientific notation ("1e3").
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or "e" in stripped.lower() or "." in stripped:
            return None
        try:
            return int(stripped)
        except ValueError:
            return None
    return None


def clean_text(value: Any) -> str:
    """Trimmed text; anything that is not a string counts as blank."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def validate_product(payload: dict | None) -> dict[str, str]:
    """
    Check a proposed product.

    The discounted price only has to beat the cost price; it may be higher
    than the selling price.
    """
    payload = payload or {}
    errors: dict[str, str] = {}

    if not clean_text(payload.get("name")):
        errors["name"] = "Product name is required"

    cost = parse_amount(payload.get("costPrice"))
    if cost is None:
        errors["costPrice"] = "Valid cost price is required"

    selling = parse_amount(payload.get("sellingPrice"))
    if selling is None:
        errors["sellingPrice"] = "Valid selling price is required"
    elif cost is not None and selling <= cost:
        errors["sellingPrice"] = "Selling price must be higher than cost price"

    discounted = parse_amount(payload.get("discountedPrice"))
    if discounted is None:
        errors["discountedPrice"] = "Valid discounted price is required"
    elif cost is not None and discounted <= cost:
        errors["discountedPrice"] = "Discounted price must be higher than cost price"

    stock = parse_int(payload.get("stock"))
    if stock is None or stock < 0 or stock > MAX_STOCK:
        errors["stock"] = "Valid stock is required"

    return errors


def validate_expense(payload: dict | None) -> dict[str, str]:
    payload = payload or {}
    errors: dict[str, str] = {}

    if not clean_text(payload.get("category")):
        errors["category"] = "Category is required"
    if parse_amount(payload.get("amount")) is None:
        errors["amount"] = "Valid amount is required"
    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        errors["description"] = "Description must be text"

    return errors


def validate_customer(payload: dict | None) -> dict[str, str]:
    payload = payload or {}
    errors: dict[str, str] = {}

    if not clean_text(payload.get("name")):
        errors["name"] = "Name is required"

    email = clean_text(payload.get("email"))
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Valid email is required"

    if not clean_text(payload.get("phone")):
        errors["phone"] = "Phone is required"

    return errors


def clean_product(payload: dict | None) -> ProductFields:
    errors = validate_product(payload)
    if errors:
        raise ValidationError(errors)
    return ProductFields(
        name=clean_text(payload["name"]),
        cost_price=parse_decimal(payload["costPrice"]),
        selling_price=parse_decimal(payload["sellingPrice"]),
        discounted_price=parse_decimal(payload["discountedPrice"]),
        stock=parse_int(payload["stock"]),
    )


def clean_expense(payload: dict | None) -> ExpenseFields:
    errors = validate_expense(payload)
    if errors:
        raise ValidationError(errors)
    description = clean_text(payload.get("description"))
    return ExpenseFields(
        category=clean_text(payload["category"]),
        amount=parse_decimal(payload["amount"]),
        description=description or None,
    )


def clean_customer(payload: dict | None) -> CustomerFields:
    errors = validate_customer(payload)
    if errors:
        raise ValidationError(errors)
    return CustomerFields(
        name=clean_text(payload["name"]),
        email=clean_text(payload["email"]),
        phone=clean_text(payload["phone"]),
    )
