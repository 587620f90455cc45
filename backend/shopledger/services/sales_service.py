# Overview: Sales ledger and the sell workflow (stock decrement + sale record as one unit).

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import NotFoundError, ValidationError
from ..models import PRICE_TIER_REGULAR, PRICE_TIERS, Sale
from ..time_utils import utcnow
from ..validation import parse_int
from .persistence_service import NAMESPACE_PRODUCTS, NAMESPACE_SALES
from .results import CommandResult

if TYPE_CHECKING:
    from .state import LedgerState


class SalesLedger:
    """
    Insertion-ordered sale records with a product_id -> sale ids index.

    Sales are never edited. They leave the ledger only through a product
    cascade or the sales-list delete, which does not give stock back.
    """

    def __init__(self):
        self._sales: dict[int, Sale] = {}
        self._by_product: dict[int, dict[int, None]] = {}

    def __len__(self) -> int:
        return len(self._sales)

    def replace(self, sales: Iterable[Sale]) -> None:
        self._sales = {}
        self._by_product = {}
        for sale in sales:
            self.append(sale)

    def next_id(self) -> int:
        return max(self._sales, default=0) + 1

    def append(self, sale: Sale) -> Sale:
        if sale.id in self._sales:
            raise ValueError(f"sale id {sale.id} already recorded")
        self._sales[sale.id] = sale
        self._by_product.setdefault(sale.product_id, {})[sale.id] = None
        return sale

    def record(self, product_id: int, quantity: int, price: Decimal, timestamp: Optional[datetime] = None) -> Sale:
        sale = Sale(
            id=self.next_id(),
            product_id=product_id,
            quantity=quantity,
            price=price,
            timestamp=timestamp or utcnow(),
        )
        return self.append(sale)

    def get(self, sale_id: int) -> Optional[Sale]:
        return self._sales.get(sale_id)

    def delete(self, sale_id: int) -> Sale:
        sale = self._sales.pop(sale_id, None)
        if sale is None:
            raise NotFoundError("Sale", sale_id)
        ids = self._by_product.get(sale.product_id)
        if ids is not None:
            ids.pop(sale_id, None)
            if not ids:
                del self._by_product[sale.product_id]
        return sale

    def cascade_delete_by_product(self, product_id: int) -> list[Sale]:
        removed = [self._sales.pop(sale_id) for sale_id in self._by_product.pop(product_id, {})]
        return removed

    def list_by_product(self, product_id: int) -> list[Sale]:
        return [self._sales[sale_id] for sale_id in self._by_product.get(product_id, {})]

    def list_all(self) -> list[Sale]:
        return list(self._sales.values())

    def list_recent(self) -> list[Sale]:
        """Newest first; ties broken by id."""
        return sorted(self._sales.values(), key=lambda s: (s.timestamp, s.id), reverse=True)


def _parse_sell_request(quantity, tier) -> int:
    errors = {}
    qty = parse_int(quantity)
    if qty is None or qty <= 0:
        errors["quantity"] = "Valid quantity is required"
    if tier not in PRICE_TIERS:
        errors["tier"] = f"Price tier must be one of: {', '.join(sorted(PRICE_TIERS))}"
    if errors:
        raise ValidationError(errors)
    return qty


def sell_product(
    ledger: LedgerState,
    product_id: int,
    quantity,
    tier: str = PRICE_TIER_REGULAR,
) -> CommandResult:
    """
    Sell units of a product at the regular or discounted price.

    The stock decrement and the sale record succeed together or not at all.

    Raises:
        ValidationError: quantity is not a positive integer or tier is unknown
        NotFoundError: unknown product id
        InsufficientStockError: quantity exceeds current stock
    """
    qty = _parse_sell_request(quantity, tier)
    with ledger.command():
        price = ledger.inventory.sell(product_id, qty, tier)
        try:
            sale = ledger.sales.record(product_id, qty, price)
        except Exception:
            ledger.inventory.release(product_id, qty)
            raise
        warnings = ledger.snapshot(NAMESPACE_PRODUCTS, NAMESPACE_SALES)
    return CommandResult(sale, warnings)


def delete_sale(ledger: LedgerState, sale_id: int) -> CommandResult:
    """
    Remove one sale record from the sales list.

    Stock is NOT restored: this removes a ledger record, it does not reverse
    the inventory movement. Revenue drops while cost of sold items does not.
    """
    with ledger.command():
        sale = ledger.sales.delete(sale_id)
        warnings = ledger.snapshot(NAMESPACE_SALES)
    return CommandResult(sale, warnings)


def list_sales(ledger: LedgerState, order: str = "insertion") -> list[Sale]:
    if order == "recent":
        return ledger.sales.list_recent()
    if order == "insertion":
        return ledger.sales.list_all()
    raise ValidationError({"order": "Order must be one of: insertion, recent"})


def product_sales(ledger: LedgerState, product_id: int) -> list[Sale]:
    ledger.inventory.require(product_id)
    return ledger.sales.list_by_product(product_id)
