"""
Inventory store tests.

Verifies:
- Id assignment (max + 1)
- Create and edit both reset stock and originalStock
- Delete cascades to the product's sales only
- sell() decrements stock, reports the tier price, and refuses oversells
- stock <= originalStock after every operation
"""

from decimal import Decimal

import pytest

from shopledger.errors import InsufficientStockError, NotFoundError, ValidationError
from shopledger.models import PRICE_TIER_DISCOUNTED, PRICE_TIER_REGULAR
from shopledger.services import inventory_service, sales_service
from shopledger.services.reconciliation_service import ledger_summary

from tests.conftest import GADGET, WIDGET


def assert_stock_invariant(ledger):
    for product in ledger.inventory.list():
        assert 0 <= product.stock <= product.original_stock, product


class TestCreateProduct:

    def test_create_sets_stock_and_original_stock(self, ledger):
        product = inventory_service.create_product(ledger, dict(WIDGET)).value

        assert product.id == 1
        assert product.name == "Widget"
        assert product.cost_price == Decimal("100")
        assert product.stock == 10
        assert product.original_stock == 10

    def test_ids_are_max_plus_one(self, ledger, widget, gadget):
        inventory_service.delete_product(ledger, widget.id)
        third = inventory_service.create_product(ledger, dict(WIDGET)).value
        assert third.id == gadget.id + 1

    def test_id_reused_after_deleting_highest(self, ledger, widget, gadget):
        inventory_service.delete_product(ledger, gadget.id)
        again = inventory_service.create_product(ledger, dict(GADGET)).value
        assert again.id == 2

    def test_invalid_product_is_not_added(self, ledger):
        with pytest.raises(ValidationError) as exc_info:
            inventory_service.create_product(ledger, {"name": ""})
        assert "name" in exc_info.value.errors
        assert len(ledger.inventory) == 0

    def test_out_of_range_price_is_not_added(self, ledger, widget):
        payload = dict(WIDGET, costPrice="1e999999", sellingPrice="2e999999", discountedPrice="2e999999")

        with pytest.raises(ValidationError) as exc_info:
            inventory_service.create_product(ledger, payload)

        assert exc_info.value.errors["costPrice"] == "Valid cost price is required"
        assert len(ledger.inventory) == 1
        assert ledger_summary(ledger).total_investment == 1000

    def test_list_preserves_insertion_order(self, ledger, widget, gadget):
        assert [p.name for p in inventory_service.list_products(ledger)] == ["Widget", "Gadget"]


class TestEditProduct:

    def test_edit_resets_stock_and_original_stock(self, ledger, widget):
        sales_service.sell_product(ledger, widget.id, 4)
        assert widget.stock == 6

        payload = dict(WIDGET, name="Widget v2", costPrice="90", stock=25)
        edited = inventory_service.update_product(ledger, widget.id, payload).value

        assert edited.name == "Widget v2"
        assert edited.cost_price == Decimal("90")
        assert edited.stock == 25
        assert edited.original_stock == 25

    def test_edit_does_not_replay_sales(self, ledger, widget):
        sales_service.sell_product(ledger, widget.id, 4)
        inventory_service.update_product(ledger, widget.id, dict(WIDGET, stock=3))

        assert widget.stock == 3
        assert widget.sold_units == 0
        assert len(ledger.sales.list_by_product(widget.id)) == 1

    def test_edit_unknown_product(self, ledger):
        with pytest.raises(NotFoundError):
            inventory_service.update_product(ledger, 42, dict(WIDGET))

    def test_not_found_reported_before_validation(self, ledger):
        with pytest.raises(NotFoundError):
            inventory_service.update_product(ledger, 42, {})

    def test_invalid_edit_leaves_product_untouched(self, ledger, widget):
        with pytest.raises(ValidationError):
            inventory_service.update_product(ledger, widget.id, dict(WIDGET, sellingPrice="10", stock=99))
        assert widget.selling_price == Decimal("150")
        assert widget.stock == 10


class TestDeleteProduct:

    def test_delete_cascades_only_to_own_sales(self, ledger, widget, gadget):
        sales_service.sell_product(ledger, widget.id, 2)
        sales_service.sell_product(ledger, gadget.id, 1)
        sales_service.sell_product(ledger, widget.id, 1, PRICE_TIER_DISCOUNTED)

        result = inventory_service.delete_product(ledger, widget.id)

        assert result.value["removed_sales"] == 2
        assert ledger.inventory.get(widget.id) is None
        remaining = ledger.sales.list_all()
        assert len(remaining) == 1
        assert remaining[0].product_id == gadget.id

    def test_delete_unknown_product(self, ledger, widget):
        with pytest.raises(NotFoundError):
            inventory_service.delete_product(ledger, 99)
        assert len(ledger.inventory) == 1


class TestInventoryStoreSell:

    def test_sell_decrements_and_returns_tier_price(self, ledger, widget):
        assert ledger.inventory.sell(widget.id, 3, PRICE_TIER_REGULAR) == Decimal("150")
        assert ledger.inventory.sell(widget.id, 2, PRICE_TIER_DISCOUNTED) == Decimal("120")
        assert widget.stock == 5

    def test_sell_does_not_record_sale(self, ledger, widget):
        ledger.inventory.sell(widget.id, 1, PRICE_TIER_REGULAR)
        assert len(ledger.sales) == 0

    @pytest.mark.parametrize("quantity", [0, -1, 11])
    def test_sell_rejects_bad_quantity_without_mutation(self, ledger, widget, quantity):
        with pytest.raises(InsufficientStockError):
            ledger.inventory.sell(widget.id, quantity, PRICE_TIER_REGULAR)
        assert widget.stock == 10

    def test_sell_unknown_product(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.inventory.sell(5, 1, PRICE_TIER_REGULAR)

    def test_release_cannot_exceed_original_stock(self, ledger, widget):
        with pytest.raises(ValueError):
            ledger.inventory.release(widget.id, 1)


class TestStockInvariant:

    def test_invariant_holds_through_mixed_operations(self, ledger, widget, gadget):
        steps = [
            lambda: sales_service.sell_product(ledger, widget.id, 3),
            lambda: sales_service.sell_product(ledger, gadget.id, 5, PRICE_TIER_DISCOUNTED),
            lambda: inventory_service.update_product(ledger, widget.id, dict(WIDGET, stock=2)),
            lambda: sales_service.sell_product(ledger, widget.id, 2),
            lambda: sales_service.delete_sale(ledger, ledger.sales.list_all()[0].id),
            lambda: inventory_service.create_product(ledger, dict(WIDGET, name="Extra", stock=0)),
        ]
        for step in steps:
            step()
            assert_stock_invariant(ledger)

        with pytest.raises(InsufficientStockError):
            sales_service.sell_product(ledger, widget.id, 1)
        assert_stock_invariant(ledger)
