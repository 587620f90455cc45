# Overview: Financial aggregates derived from the raw ledger records.

from __future__ import annotations

import warnings
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Sequence

from ..models import Expense, Product, Sale

if TYPE_CHECKING:
    from .state import LedgerState

"""
Reconciliation invariants (authoritative)

- Every figure is a pure function of the current products, sales and expenses.
  Nothing is cached between calls and no other module keeps a running total.
- profit = total_revenue - cost_of_sold_items. Unsold stock does not reduce
  profit.
- The older "revenue - total investment" figure is still available through
  profit_against_investment(), which warns that it is deprecated.
- cost_of_sold_items comes from products (original_stock - stock) while
  total_revenue comes from sales. Removing a sale from the sales list lowers
  revenue without touching stock, so the two can drift apart; a product edit
  resets original_stock and does the same from the other side.
"""

ZERO = Decimal("0")


def total_investment(products: Sequence[Product]) -> Decimal:
    return sum((p.cost_price * p.original_stock for p in products), ZERO)


def remaining_stock_value(products: Sequence[Product]) -> Decimal:
    return sum((p.cost_price * p.stock for p in products), ZERO)


def total_revenue(sales: Sequence[Sale]) -> Decimal:
    return sum((s.price * s.quantity for s in sales), ZERO)


def cost_of_sold_items(products: Sequence[Product]) -> Decimal:
    return sum((p.cost_price * p.sold_units for p in products), ZERO)


def profit(products: Sequence[Product], sales: Sequence[Sale]) -> Decimal:
    return total_revenue(sales) - cost_of_sold_items(products)


def profit_against_investment(products: Sequence[Product], sales: Sequence[Sale]) -> Decimal:
    """Deprecated: revenue minus the cost of everything ever stocked."""
    warnings.warn(
        "profit_against_investment() is deprecated; use profit(), which charges only the cost of sold items",
        DeprecationWarning,
        stacklevel=2,
    )
    return total_revenue(sales) - total_investment(products)


def total_expenses(expenses: Sequence[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def available_cash(products: Sequence[Product], sales: Sequence[Sale], expenses: Sequence[Expense]) -> Decimal:
    return profit(products, sales) - total_expenses(expenses)


def total_original_stock(products: Sequence[Product]) -> int:
    return sum(p.original_stock for p in products)


def total_units_sold(products: Sequence[Product]) -> int:
    return sum(p.sold_units for p in products)


def all_sold(products: Sequence[Product]) -> bool:
    original = total_original_stock(products)
    return original > 0 and original == total_units_sold(products)


@dataclass(frozen=True)
class LedgerSummary:
    total_investment: Decimal
    remaining_stock_value: Decimal
    total_revenue: Decimal
    cost_of_sold_items: Decimal
    profit: Decimal
    total_expenses: Decimal
    available_cash: Decimal
    total_original_stock: int
    total_units_sold: int
    all_sold: bool

    def to_dict(self) -> dict:
        return {
            "totalInvestment": str(self.total_investment),
            "remainingStockValue": str(self.remaining_stock_value),
            "totalRevenue": str(self.total_revenue),
            "costOfSoldItems": str(self.cost_of_sold_items),
            "profit": str(self.profit),
            "totalExpenses": str(self.total_expenses),
            "availableCash": str(self.available_cash),
            "totalOriginalStock": self.total_original_stock,
            "totalUnitsSold": self.total_units_sold,
            "allSold": self.all_sold,
        }


def summarize(
    products: Sequence[Product],
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
) -> LedgerSummary:
    revenue = total_revenue(sales)
    sold_cost = cost_of_sold_items(products)
    spent = total_expenses(expenses)
    net = revenue - sold_cost
    return LedgerSummary(
        total_investment=total_investment(products),
        remaining_stock_value=remaining_stock_value(products),
        total_revenue=revenue,
        cost_of_sold_items=sold_cost,
        profit=net,
        total_expenses=spent,
        available_cash=net - spent,
        total_original_stock=total_original_stock(products),
        total_units_sold=total_units_sold(products),
        all_sold=all_sold(products),
    )


def ledger_summary(ledger: LedgerState) -> LedgerSummary:
    with ledger.command():
        return summarize(ledger.inventory.list(), ledger.sales.list_all(), ledger.expenses.list_all())
