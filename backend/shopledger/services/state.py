# Overview: The ledger state container shared by every command handler.

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app

from ..models import Customer, Expense, Product, Sale
from .customer_service import CustomerBook
from .expense_service import ExpenseLedger
from .inventory_service import InventoryStore
from .persistence_service import (
    NAMESPACE_CUSTOMERS,
    NAMESPACE_EXPENSES,
    NAMESPACE_PRODUCTS,
    NAMESPACE_SALES,
    NAMESPACES,
    BlobStore,
    PersistenceAdapter,
    SqlBlobStore,
)
from .results import CommandResult
from .sales_service import SalesLedger

EXTENSION_KEY = "shopledger"


class LedgerState:
    """
    Owns the inventory store, sales ledger, expense ledger and customer
    directory plus their persistence adapter.

    Passed explicitly to every service function so each test (or app) builds
    its own isolated instance. Command bodies run under a re-entrant lock,
    one at a time: validate -> mutate -> snapshot.
    """

    def __init__(self, store: BlobStore, *, key_prefix: str = ""):
        self.persistence = PersistenceAdapter(store, key_prefix=key_prefix)
        self.sales = SalesLedger()
        self.inventory = InventoryStore(on_delete=self.sales.cascade_delete_by_product)
        self.expenses = ExpenseLedger()
        self.customers = CustomerBook()
        self.loaded = False
        self._lock = threading.RLock()

    @classmethod
    def from_store(cls, store: BlobStore, *, key_prefix: str = "") -> "LedgerState":
        return cls(store, key_prefix=key_prefix).load()

    @contextmanager
    def command(self) -> Iterator["LedgerState"]:
        with self._lock:
            yield self

    def load(self) -> "LedgerState":
        """(Re)load every namespace; bad or missing data loads as empty."""
        with self._lock:
            self.inventory.replace(
                self.persistence.load(NAMESPACE_PRODUCTS, lambda data, _index: Product.from_dict(data))
            )
            # Sales written without ids are numbered by position
            self.sales.replace(
                self.persistence.load(NAMESPACE_SALES, lambda data, index: Sale.from_dict(data, fallback_id=index + 1))
            )
            self.expenses.replace(
                self.persistence.load(NAMESPACE_EXPENSES, lambda data, _index: Expense.from_dict(data))
            )
            self.customers.replace(
                self.persistence.load(NAMESPACE_CUSTOMERS, lambda data, _index: Customer.from_dict(data))
            )
            self.loaded = True
        return self

    def records(self, namespace: str) -> list:
        if namespace == NAMESPACE_PRODUCTS:
            return self.inventory.list()
        if namespace == NAMESPACE_SALES:
            return self.sales.list_all()
        if namespace == NAMESPACE_EXPENSES:
            return self.expenses.list_all()
        if namespace == NAMESPACE_CUSTOMERS:
            return self.customers.list()
        raise ValueError(f"unknown namespace: {namespace}")

    def snapshot(self, *namespaces: str) -> tuple[str, ...]:
        """Write each namespace in full; returns warning messages for failed writes."""
        warnings = []
        for namespace in namespaces:
            failure = self.persistence.save(namespace, self.records(namespace))
            if failure is not None:
                warnings.append(str(failure))
        return tuple(warnings)

    def clear(self) -> CommandResult:
        """Empty every collection and write the empty snapshots."""
        with self.command():
            self.inventory.replace([])
            self.sales.replace([])
            self.expenses.replace([])
            self.customers.replace([])
            warnings = self.snapshot(*NAMESPACES)
        return CommandResult(None, warnings)


def init_app(app: Flask) -> None:
    """Attach an unloaded ledger backed by the ledger_blobs table."""
    app.extensions[EXTENSION_KEY] = LedgerState(
        SqlBlobStore(),
        key_prefix=app.config.get("LEDGER_KEY_PREFIX", ""),
    )


def current_ledger() -> LedgerState:
    """The app's ledger, loaded from the durable store on first use."""
    ledger: LedgerState = current_app.extensions[EXTENSION_KEY]
    if not ledger.loaded:
        ledger.load()
    return ledger
