# Overview: Customer directory; contact records kept apart from products, sales and expenses.

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import NotFoundError
from ..models import Customer
from ..validation import CustomerFields, clean_customer
from .persistence_service import NAMESPACE_CUSTOMERS
from .results import CommandResult

if TYPE_CHECKING:
    from .state import LedgerState


class CustomerBook:
    def __init__(self):
        self._customers: dict[int, Customer] = {}

    def __len__(self) -> int:
        return len(self._customers)

    def replace(self, customers: Iterable[Customer]) -> None:
        self._customers = {c.id: c for c in customers}

    def next_id(self) -> int:
        return max(self._customers, default=0) + 1

    def get(self, customer_id: int) -> Optional[Customer]:
        return self._customers.get(customer_id)

    def require(self, customer_id: int) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def list(self) -> list[Customer]:
        return list(self._customers.values())

    def add(self, fields: CustomerFields) -> Customer:
        customer = Customer(id=self.next_id(), name=fields.name, email=fields.email, phone=fields.phone)
        self._customers[customer.id] = customer
        return customer

    def edit(self, customer_id: int, fields: CustomerFields) -> Customer:
        customer = self.require(customer_id)
        customer.name = fields.name
        customer.email = fields.email
        customer.phone = fields.phone
        return customer

    def delete(self, customer_id: int) -> Customer:
        customer = self.require(customer_id)
        del self._customers[customer_id]
        return customer


def list_customers(ledger: LedgerState) -> list[Customer]:
    return ledger.customers.list()


def get_customer(ledger: LedgerState, customer_id: int) -> Customer:
    return ledger.customers.require(customer_id)


def create_customer(ledger: LedgerState, payload: dict) -> CommandResult:
    fields = clean_customer(payload)
    with ledger.command():
        customer = ledger.customers.add(fields)
        warnings = ledger.snapshot(NAMESPACE_CUSTOMERS)
    return CommandResult(customer, warnings)


def update_customer(ledger: LedgerState, customer_id: int, payload: dict) -> CommandResult:
    """
    Replace a customer's name, email and phone.

    Raises:
        NotFoundError: unknown customer id (checked before validation)
        ValidationError: with the field -> message mapping
    """
    with ledger.command():
        ledger.customers.require(customer_id)
        fields = clean_customer(payload)
        customer = ledger.customers.edit(customer_id, fields)
        warnings = ledger.snapshot(NAMESPACE_CUSTOMERS)
    return CommandResult(customer, warnings)


def delete_customer(ledger: LedgerState, customer_id: int) -> CommandResult:
    with ledger.command():
        customer = ledger.customers.delete(customer_id)
        warnings = ledger.snapshot(NAMESPACE_CUSTOMERS)
    return CommandResult(customer, warnings)
