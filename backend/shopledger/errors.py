# Overview: Exception types raised by ledger commands and the persistence adapter.

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failed ledger commands."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ValidationError(LedgerError):
    """Field-level input problems; `errors` maps field name to message."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("Validation failed", details={"errors": dict(errors)})
        self.errors = dict(errors)


class NotFoundError(LedgerError):
    """Referenced product, sale or expense id does not exist."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found", details={"entity": entity, "id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(LedgerError):
    """Sell quantity is not positive or exceeds the product's current stock."""

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock: {available} available, {requested} requested for product {product_id}",
            details={"product_id": product_id, "requested_quantity": requested, "on_hand": available},
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class PersistenceReadError(LedgerError):
    """A namespace could not be read from the durable store."""


class PersistenceWriteError(LedgerError):
    """A namespace snapshot could not be written; in-memory state stays authoritative."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to save '{key}': {reason}", details={"key": key})
        self.key = key
