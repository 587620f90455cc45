# Overview: Flask API routes for the sales list; parses input and returns JSON responses.

# backend/shopledger/routes/sales.py
"""Sales list routes. Deleting a sale here does not put stock back."""

from flask import Blueprint, current_app, request

from ..errors import LedgerError
from ..responses import error_response, with_warnings
from ..services import sales_service
from ..services.state import current_ledger


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
def list_sales_route():
    """
    List sales.

    Query params:
    - order: "insertion" (default) or "recent" (newest first)
    """
    order = request.args.get("order", "insertion")
    ledger = current_ledger()

    try:
        sales = sales_service.list_sales(ledger, order=order)
    except LedgerError as e:
        return error_response(e)

    items = []
    for sale in sales:
        product = ledger.inventory.get(sale.product_id)
        row = sale.to_dict()
        row["productName"] = product.name if product else None
        row["total"] = str(sale.total)
        items.append(row)

    return {"items": items, "count": len(items)}


@sales_bp.delete("/<int:sale_id>")
def delete_sale_route(sale_id: int):
    """Remove a sale record. Stock is not restored."""
    try:
        result = sales_service.delete_sale(current_ledger(), sale_id)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return {"error": "Internal server error"}, 500

    return with_warnings({"ok": True, "sale": result.value.to_dict()}, result), 200
