"""
HTTP API tests.

Verifies:
- Product CRUD, selling and cascade delete over JSON
- Error mapping: 400 validation, 404 unknown id, 409 insufficient stock
- Sales list ordering and deletion without stock restore
- Expense form, quick add and category suggestions
- Customer directory CRUD
- Bodies that are JSON but not an object are rejected with 400
- Summary and health endpoints
- Every command is written to the ledger_blobs table
"""

import json

import pytest

from shopledger.extensions import db
from shopledger.models import LedgerBlob
from shopledger.services.persistence_service import SqlBlobStore
from shopledger.services.state import LedgerState

from tests.conftest import GADGET, WIDGET


def create(client, payload):
    resp = client.post("/api/products", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


# =============================================================================
# PRODUCTS
# =============================================================================


class TestProductRoutes:

    def test_create_and_list(self, client):
        body = create(client, WIDGET)

        assert body["id"] == 1
        assert body["stock"] == body["originalStock"] == 10
        assert body["costPrice"] == "100"
        assert body["soldUnits"] == 0
        assert body["stockValue"] == "1000"

        listing = client.get("/api/products").get_json()
        assert listing["count"] == 1
        assert listing["items"][0]["name"] == "Widget"

    def test_create_invalid_returns_field_errors(self, client):
        resp = client.post("/api/products", json={"name": "", "costPrice": "x", "stock": -1})

        assert resp.status_code == 400
        errors = resp.get_json()["errors"]
        assert {"name", "costPrice", "stock"} <= set(errors)
        assert client.get("/api/products").get_json()["count"] == 0

    def test_get_unknown_product(self, client):
        resp = client.get("/api/products/9")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Product not found"

    def test_update_restocks(self, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 4})

        resp = client.put(f"/api/products/{product['id']}", json=dict(WIDGET, stock=20))

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["stock"] == body["originalStock"] == 20

    def test_delete_cascades_to_sales(self, client):
        widget = create(client, WIDGET)
        gadget = create(client, GADGET)
        client.post(f"/api/products/{widget['id']}/sell", json={"quantity": 2})
        client.post(f"/api/products/{widget['id']}/sell", json={"quantity": 1, "tier": "discounted"})
        client.post(f"/api/products/{gadget['id']}/sell", json={"quantity": 1})

        resp = client.delete(f"/api/products/{widget['id']}")

        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True, "removedSales": 2}
        sales = client.get("/api/sales").get_json()["items"]
        assert [s["productId"] for s in sales] == [gadget["id"]]


# =============================================================================
# SELLING
# =============================================================================


class TestSellRoutes:

    def test_sell_returns_sale_and_product(self, client):
        product = create(client, WIDGET)

        resp = client.post(f"/api/products/{product['id']}/sell", json={"quantity": 3, "tier": "discounted"})

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["sale"]["price"] == "120"
        assert body["sale"]["quantity"] == 3
        assert body["product"]["stock"] == 7
        assert body["product"]["soldUnits"] == 3

    def test_oversell_is_conflict(self, client):
        product = create(client, dict(WIDGET, stock=2))

        resp = client.post(f"/api/products/{product['id']}/sell", json={"quantity": 5})

        assert resp.status_code == 409
        assert resp.get_json()["details"]["on_hand"] == 2
        assert client.get(f"/api/products/{product['id']}").get_json()["stock"] == 2

    def test_zero_quantity_is_bad_request(self, client):
        product = create(client, WIDGET)
        resp = client.post(f"/api/products/{product['id']}/sell", json={"quantity": 0})
        assert resp.status_code == 400
        assert "quantity" in resp.get_json()["errors"]

    def test_sell_unknown_product(self, client):
        resp = client.post("/api/products/5/sell", json={"quantity": 1})
        assert resp.status_code == 404

    def test_product_sales(self, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 1})

        body = client.get(f"/api/products/{product['id']}/sales").get_json()
        assert body["count"] == 1
        assert client.get("/api/products/77/sales").status_code == 404


# =============================================================================
# SALES LIST
# =============================================================================


class TestSalesRoutes:

    def test_recent_order_and_product_name(self, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 1})
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 2})

        items = client.get("/api/sales?order=recent").get_json()["items"]

        assert [s["id"] for s in items] == [2, 1]
        assert items[0]["productName"] == "Widget"
        assert items[0]["total"] == "300"

    def test_unknown_order(self, client):
        assert client.get("/api/sales?order=random").status_code == 400

    def test_delete_sale_keeps_stock(self, client):
        product = create(client, WIDGET)
        sale = client.post(f"/api/products/{product['id']}/sell", json={"quantity": 3}).get_json()["sale"]

        resp = client.delete(f"/api/sales/{sale['id']}")

        assert resp.status_code == 200
        assert resp.get_json()["sale"]["id"] == sale["id"]
        assert client.get(f"/api/products/{product['id']}").get_json()["stock"] == 7
        assert client.delete(f"/api/sales/{sale['id']}").status_code == 404


# =============================================================================
# EXPENSES
# =============================================================================


class TestExpenseRoutes:

    def test_create_and_list(self, client):
        resp = client.post("/api/expenses", json={"category": "Food", "amount": 10000, "description": "Lunch"})

        assert resp.status_code == 201
        assert resp.get_json()["amount"] == "10000"
        listing = client.get("/api/expenses").get_json()
        assert listing["count"] == 1

    def test_invalid_expense(self, client):
        resp = client.post("/api/expenses", json={"category": "Food", "amount": -5})
        assert resp.status_code == 400
        assert "amount" in resp.get_json()["errors"]

    def test_quick_expense(self, client):
        resp = client.post("/api/expenses/quick", json={"category": "Transport", "amount": "2500"})
        assert resp.status_code == 201
        assert resp.get_json()["category"] == "Transport"

        assert client.post("/api/expenses/quick", json={"category": " ", "amount": 5}).status_code == 400

    def test_quick_expense_non_text_category(self, client):
        resp = client.post("/api/expenses/quick", json={"category": 5, "amount": 10})

        assert resp.status_code == 400
        assert "category" in resp.get_json()["errors"]
        assert client.get("/api/expenses").get_json()["count"] == 0

    def test_categories_include_configured_and_used(self, client):
        client.post("/api/expenses", json={"category": "Packaging", "amount": 5})

        items = client.get("/api/expenses/categories").get_json()["items"]

        assert items[:2] == ["Food", "Rent"]
        assert items[-1] == "Packaging"

    def test_delete_expense(self, client):
        expense = client.post("/api/expenses", json={"category": "Food", "amount": 1}).get_json()

        assert client.delete(f"/api/expenses/{expense['id']}").get_json() == {"ok": True}
        assert client.delete(f"/api/expenses/{expense['id']}").status_code == 404


# =============================================================================
# CUSTOMERS
# =============================================================================


CUSTOMER = {"name": "Aziz", "email": "aziz@example.com", "phone": "+998 90 123 45 67"}


class TestCustomerRoutes:

    def test_create_list_update_delete(self, client):
        resp = client.post("/api/customers", json=CUSTOMER)
        assert resp.status_code == 201
        customer = resp.get_json()
        assert customer["id"] == 1

        resp = client.put(f"/api/customers/{customer['id']}", json=dict(CUSTOMER, phone="555-0101"))
        assert resp.status_code == 200
        assert resp.get_json()["phone"] == "555-0101"

        listing = client.get("/api/customers").get_json()
        assert listing["count"] == 1

        assert client.delete(f"/api/customers/{customer['id']}").get_json() == {"ok": True}
        assert client.get(f"/api/customers/{customer['id']}").status_code == 404

    def test_invalid_customer(self, client):
        resp = client.post("/api/customers", json={"name": "Aziz", "email": "not-an-email", "phone": ""})

        assert resp.status_code == 400
        assert resp.get_json()["errors"] == {
            "email": "Valid email is required",
            "phone": "Phone is required",
        }

    def test_update_unknown_customer(self, client):
        assert client.put("/api/customers/4", json=CUSTOMER).status_code == 404


# =============================================================================
# REQUEST BODIES
# =============================================================================


class TestRequestBodies:

    @pytest.mark.parametrize(
        "path",
        ["/api/products", "/api/expenses", "/api/expenses/quick", "/api/customers"],
    )
    def test_array_body_is_rejected(self, client, path):
        resp = client.post(path, json=[1, 2, 3])
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be a JSON object"

    def test_array_body_on_sell_and_update(self, client):
        product = create(client, WIDGET)

        assert client.post(f"/api/products/{product['id']}/sell", json=[3]).status_code == 400
        assert client.put(f"/api/products/{product['id']}", json=["Widget"]).status_code == 400
        assert client.get(f"/api/products/{product['id']}").get_json()["stock"] == 10


# =============================================================================
# REPORTS AND HEALTH
# =============================================================================


class TestReportRoutes:

    def test_summary(self, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 3})
        client.post("/api/expenses", json={"category": "Food", "amount": 100})

        body = client.get("/api/reports/summary").get_json()

        assert body["totalInvestment"] == "1000"
        assert body["totalRevenue"] == "450"
        assert body["costOfSoldItems"] == "300"
        assert body["profit"] == "150"
        assert body["remainingStockValue"] == "700"
        assert body["totalExpenses"] == "100"
        assert body["availableCash"] == "50"
        assert body["allSold"] is False

    def test_sales_report_bad_grouping(self, client):
        assert client.get("/api/reports/sales?group_by=year").status_code == 400

    def test_product_and_expense_reports(self, client):
        create(client, WIDGET)
        assert client.get("/api/reports/products").get_json()["count"] == 1
        assert client.get("/api/reports/expenses").get_json()["rows"] == []

    def test_health(self, client):
        create(client, WIDGET)

        resp = client.get("/health")

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "healthy"
        assert body["checks"]["ledger"] == {"products": 1, "sales": 0, "expenses": 0, "customers": 0}


# =============================================================================
# DURABILITY
# =============================================================================


class TestDurability:

    def test_commands_are_written_to_blob_table(self, app, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 2})

        row = db.session.get(LedgerBlob, "sales")
        assert json.loads(row.blob)[0]["quantity"] == 2

    def test_fresh_ledger_sees_saved_state(self, app, client):
        product = create(client, WIDGET)
        client.post(f"/api/products/{product['id']}/sell", json={"quantity": 2})
        client.post("/api/expenses", json={"category": "Rent", "amount": 300})

        fresh = LedgerState.from_store(SqlBlobStore())

        assert fresh.inventory.get(product["id"]).stock == 8
        assert len(fresh.sales) == 1
        assert len(fresh.expenses) == 1
