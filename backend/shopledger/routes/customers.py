# Overview: Flask API routes for the customer directory; parses input and returns JSON responses.

# backend/shopledger/routes/customers.py
from flask import Blueprint, current_app

from ..errors import LedgerError
from ..responses import NOT_AN_OBJECT, error_response, json_object_body, with_warnings
from ..services import customer_service
from ..services.state import current_ledger


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers_route():
    customers = customer_service.list_customers(current_ledger())
    return {
        "items": [c.to_dict() for c in customers],
        "count": len(customers),
    }


@customers_bp.get("/<int:customer_id>")
def get_customer_route(customer_id: int):
    try:
        customer = customer_service.get_customer(current_ledger(), customer_id)
    except LedgerError as e:
        return error_response(e)
    return customer.to_dict()


@customers_bp.post("")
def create_customer_route():
    """
    Add a customer.

    Body: {"name": str, "email": str, "phone": str}
    """
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = customer_service.create_customer(current_ledger(), payload)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return {"error": "Internal server error"}, 500

    return with_warnings(result.value.to_dict(), result), 201


@customers_bp.put("/<int:customer_id>")
def update_customer_route(customer_id: int):
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = customer_service.update_customer(current_ledger(), customer_id, payload)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return {"error": "Internal server error"}, 500

    return with_warnings(result.value.to_dict(), result), 200


@customers_bp.delete("/<int:customer_id>")
def delete_customer_route(customer_id: int):
    try:
        result = customer_service.delete_customer(current_ledger(), customer_id)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete customer")
        return {"error": "Internal server error"}, 500

    return with_warnings({"ok": True}, result), 200
