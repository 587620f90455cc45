# Overview: Flask API routes for expenses; parses input and returns JSON responses.

# backend/shopledger/routes/expenses.py
from flask import Blueprint, current_app

from ..errors import LedgerError
from ..responses import NOT_AN_OBJECT, error_response, json_object_body, with_warnings
from ..services import expense_service
from ..services.state import current_ledger


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
def list_expenses_route():
    expenses = expense_service.list_expenses(current_ledger())
    return {
        "items": [e.to_dict() for e in expenses],
        "count": len(expenses),
    }


@expenses_bp.get("/categories")
def expense_categories_route():
    categories = expense_service.expense_categories(
        current_ledger(),
        suggested=current_app.config.get("EXPENSE_CATEGORIES", ()),
    )
    return {"items": categories}


@expenses_bp.post("")
def create_expense_route():
    """
    Record an expense from the expense form.

    Body: {"category": str, "amount": number|str, "description": str (optional)}
    """
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = expense_service.add_expense(current_ledger(), payload)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create expense")
        return {"error": "Internal server error"}, 500

    return with_warnings(result.value.to_dict(), result), 201


@expenses_bp.post("/quick")
def quick_expense_route():
    """One-tap expense: category and amount only."""
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = expense_service.add_quick_expense(
            current_ledger(),
            payload.get("category"),
            payload.get("amount"),
            payload.get("description"),
        )
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create quick expense")
        return {"error": "Internal server error"}, 500

    return with_warnings(result.value.to_dict(), result), 201


@expenses_bp.delete("/<int:expense_id>")
def delete_expense_route(expense_id: int):
    try:
        result = expense_service.delete_expense(current_ledger(), expense_id)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete expense")
        return {"error": "Internal server error"}, 500

    return with_warnings({"ok": True}, result), 200
