# Overview: Flask API routes for products and selling; parses input and returns JSON responses.

# backend/shopledger/routes/products.py
"""
Product management routes.

Request/response bodies use the stored record field names (costPrice,
sellingPrice, discountedPrice, stock, originalStock). Money values are
returned as decimal strings.
"""
from flask import Blueprint, current_app

from ..errors import LedgerError
from ..models import PRICE_TIER_REGULAR, Product
from ..responses import NOT_AN_OBJECT, error_response, json_object_body, with_warnings
from ..services import inventory_service, sales_service
from ..services.state import current_ledger

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def product_payload(product: Product) -> dict:
    body = product.to_dict()
    body["soldUnits"] = product.sold_units
    body["stockValue"] = str(product.stock_value)
    return body


@products_bp.get("")
def list_products():
    """List products in the order they were added."""
    products = inventory_service.list_products(current_ledger())
    return {
        "items": [product_payload(p) for p in products],
        "count": len(products),
    }


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        product = inventory_service.get_product(current_ledger(), product_id)
    except LedgerError as e:
        return error_response(e)
    return product_payload(product)


@products_bp.post("")
def create_product_route():
    """
    Create a product.

    stock and originalStock both start at the submitted stock.
    """
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = inventory_service.create_product(current_ledger(), payload)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return with_warnings(product_payload(result.value), result), 201


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    """
    Replace a product's name, prices and stock.

    The submitted stock becomes both stock and originalStock (re-stock).
    """
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        result = inventory_service.update_product(current_ledger(), product_id, payload)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return with_warnings(product_payload(result.value), result), 200


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    """Delete a product together with all of its sales."""
    try:
        result = inventory_service.delete_product(current_ledger(), product_id)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    body = {"ok": True, "removedSales": result.value["removed_sales"]}
    return with_warnings(body, result), 200


@products_bp.post("/<int:product_id>/sell")
def sell_product_route(product_id: int):
    """
    Sell units of a product.

    Body: {"quantity": int, "tier": "regular" | "discounted"} (tier defaults to regular)
    """
    payload = json_object_body()
    if payload is None:
        return NOT_AN_OBJECT

    try:
        ledger = current_ledger()
        result = sales_service.sell_product(
            ledger,
            product_id,
            payload.get("quantity"),
            payload.get("tier", PRICE_TIER_REGULAR),
        )
        product = inventory_service.get_product(ledger, product_id)
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to sell product")
        return {"error": "Internal server error"}, 500

    body = {"sale": result.value.to_dict(), "product": product_payload(product)}
    return with_warnings(body, result), 201


@products_bp.get("/<int:product_id>/sales")
def product_sales_route(product_id: int):
    try:
        sales = sales_service.product_sales(current_ledger(), product_id)
    except LedgerError as e:
        return error_response(e)
    return {
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
    }
