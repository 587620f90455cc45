# Overview: Read-only report projections over the ledger (per product, per period, per category).

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from ..time_utils import parse_iso_datetime, to_utc_z
from .reconciliation_service import ZERO, total_revenue

if TYPE_CHECKING:
    from .state import LedgerState

PERIOD_FORMATS = {
    "day": "%Y-%m-%d",
    "week": "%Y-W%W",
    "month": "%Y-%m",
}


class ReportError(Exception):
    """Raised when report parameters are invalid."""
    pass


def _parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    try:
        start_dt = parse_iso_datetime(start) if start else None
        end_dt = parse_iso_datetime(end) if end else None
    except ValueError:
        raise ReportError("start and end must be ISO-8601 datetimes")
    if start_dt and end_dt and start_dt > end_dt:
        raise ReportError("start must not be after end")
    return start_dt, end_dt


def sales_report(
    ledger: LedgerState,
    *,
    start: str | None = None,
    end: str | None = None,
    group_by: str = "day",
) -> dict:
    """Sales grouped by period; start/end are inclusive."""
    period_format = PERIOD_FORMATS.get(group_by)
    if period_format is None:
        raise ReportError("group_by must be day, week, or month")
    start_dt, end_dt = _parse_range(start, end)

    buckets: dict[str, dict] = {}
    with ledger.command():
        sales = ledger.sales.list_all()
    for sale in sales:
        if start_dt and sale.timestamp < start_dt:
            continue
        if end_dt and sale.timestamp > end_dt:
            continue
        period = sale.timestamp.strftime(period_format)
        bucket = buckets.setdefault(period, {"salesCount": 0, "itemsSold": 0, "revenue": ZERO})
        bucket["salesCount"] += 1
        bucket["itemsSold"] += sale.quantity
        bucket["revenue"] += sale.total

    return {
        "groupBy": group_by,
        "start": to_utc_z(start_dt) if start_dt else None,
        "end": to_utc_z(end_dt) if end_dt else None,
        "rows": [
            {
                "period": period,
                "salesCount": bucket["salesCount"],
                "itemsSold": bucket["itemsSold"],
                "revenue": str(bucket["revenue"]),
            }
            for period, bucket in sorted(buckets.items())
        ],
    }


def product_breakdown(ledger: LedgerState) -> dict:
    """Per-product stock, cost and revenue figures in inventory order."""
    with ledger.command():
        products = ledger.inventory.list()
        rows = []
        for product in products:
            revenue = total_revenue(ledger.sales.list_by_product(product.id))
            sold_cost = product.cost_price * product.sold_units
            rows.append(
                {
                    "productId": product.id,
                    "name": product.name,
                    "stock": product.stock,
                    "originalStock": product.original_stock,
                    "unitsSold": product.sold_units,
                    "stockValue": str(product.stock_value),
                    "costOfSoldItems": str(sold_cost),
                    "revenue": str(revenue),
                    "profit": str(revenue - sold_cost),
                }
            )

    return {
        "count": len(rows),
        "rows": rows,
    }


def expense_breakdown(ledger: LedgerState) -> dict:
    """Expense totals per category, largest first."""
    with ledger.command():
        expenses = ledger.expenses.list_all()

    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
        counts[expense.category] = counts.get(expense.category, 0) + 1

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return {
        "total": str(sum(totals.values(), ZERO)),
        "rows": [
            {"category": category, "count": counts[category], "total": str(total)}
            for category, total in ordered
        ],
    }
