# Overview: Service-layer operations for products; owns the in-memory inventory store.

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from ..errors import InsufficientStockError, NotFoundError
from ..models import Product
from ..validation import ProductFields, clean_product
from .persistence_service import NAMESPACE_PRODUCTS, NAMESPACE_SALES
from .results import CommandResult

if TYPE_CHECKING:
    from .state import LedgerState

"""
Inventory invariants (authoritative)

- Product ids are assigned as max(existing ids, 0) + 1.
- 0 <= stock <= original_stock for every product after every operation.
- Create and edit both set stock = original_stock = the submitted stock. An
  edit is a re-stocking event; past sales are not replayed against it.
- Deleting a product notifies on_delete with the product id so the sales
  ledger can drop that product's sales.
- sell() only decrements stock and reports the unit price. Recording the sale
  is the sell workflow's job (sales_service.sell_product).
"""


class InventoryStore:
    def __init__(self, on_delete: Optional[Callable[[int], Any]] = None):
        self._products: dict[int, Product] = {}
        self._on_delete = on_delete

    def __len__(self) -> int:
        return len(self._products)

    def replace(self, products: Iterable[Product]) -> None:
        self._products = {p.id: p for p in products}

    def next_id(self) -> int:
        return max(self._products, default=0) + 1

    def get(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def require(self, product_id: int) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def list(self) -> list[Product]:
        return list(self._products.values())

    def create(self, fields: ProductFields) -> Product:
        product = Product(
            id=self.next_id(),
            name=fields.name,
            cost_price=fields.cost_price,
            selling_price=fields.selling_price,
            discounted_price=fields.discounted_price,
            stock=fields.stock,
            original_stock=fields.stock,
        )
        self._products[product.id] = product
        return product

    def edit(self, product_id: int, fields: ProductFields) -> Product:
        product = self.require(product_id)
        product.name = fields.name
        product.cost_price = fields.cost_price
        product.selling_price = fields.selling_price
        product.discounted_price = fields.discounted_price
        product.stock = fields.stock
        product.original_stock = fields.stock
        return product

    def delete(self, product_id: int) -> Product:
        product = self.require(product_id)
        del self._products[product_id]
        if self._on_delete is not None:
            self._on_delete(product_id)
        return product

    def sell(self, product_id: int, quantity: int, tier: str) -> Decimal:
        """Decrement stock; returns the unit price of the chosen tier."""
        product = self.require(product_id)
        price = product.price_for(tier)
        if quantity <= 0 or quantity > product.stock:
            raise InsufficientStockError(product_id, quantity, product.stock)
        product.stock -= quantity
        return price

    def release(self, product_id: int, quantity: int) -> None:
        """Undo a sell() whose sale could not be recorded."""
        product = self.require(product_id)
        if product.stock + quantity > product.original_stock:
            raise ValueError(f"release of {quantity} would exceed original stock for product {product_id}")
        product.stock += quantity


def list_products(ledger: LedgerState) -> list[Product]:
    return ledger.inventory.list()


def get_product(ledger: LedgerState, product_id: int) -> Product:
    return ledger.inventory.require(product_id)


def create_product(ledger: LedgerState, payload: dict) -> CommandResult:
    """
    Validate and add a product.

    Raises:
        ValidationError: with the field -> message mapping
    """
    fields = clean_product(payload)
    with ledger.command():
        product = ledger.inventory.create(fields)
        warnings = ledger.snapshot(NAMESPACE_PRODUCTS)
    return CommandResult(product, warnings)


def update_product(ledger: LedgerState, product_id: int, payload: dict) -> CommandResult:
    """
    Replace a product's name, prices and stock.

    Raises:
        NotFoundError: unknown product id (checked before validation)
        ValidationError: with the field -> message mapping
    """
    with ledger.command():
        ledger.inventory.require(product_id)
        fields = clean_product(payload)
        product = ledger.inventory.edit(product_id, fields)
        warnings = ledger.snapshot(NAMESPACE_PRODUCTS)
    return CommandResult(product, warnings)


def delete_product(ledger: LedgerState, product_id: int) -> CommandResult:
    """Remove a product and every sale recorded against it."""
    with ledger.command():
        removed_sales = len(ledger.sales.list_by_product(product_id))
        product = ledger.inventory.delete(product_id)
        warnings = ledger.snapshot(NAMESPACE_PRODUCTS, NAMESPACE_SALES)
    return CommandResult({"product": product, "removed_sales": removed_sales}, warnings)
