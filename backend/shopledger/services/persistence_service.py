# Overview: Snapshot persistence of the ledger collections to a durable key-value store.

from __future__ import annotations

import json
import logging
from typing import Callable, Iterable, Optional, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..errors import PersistenceReadError, PersistenceWriteError
from ..extensions import db
from ..models import LedgerBlob

"""
Persistence invariants

- Independent namespaces: products, sales, expenses, customers.
- Each namespace holds a JSON array of whole records; every write replaces the
  full collection (no diffs, no schema version).
- A missing or unreadable namespace loads as an empty collection; startup never
  fails on bad data.
- A failed write is logged and returned to the caller as a warning. In-memory
  state is never reverted because of it.
"""

logger = logging.getLogger(__name__)

NAMESPACE_PRODUCTS = "products"
NAMESPACE_SALES = "sales"
NAMESPACE_EXPENSES = "expenses"
NAMESPACE_CUSTOMERS = "customers"
NAMESPACES = (NAMESPACE_PRODUCTS, NAMESPACE_SALES, NAMESPACE_EXPENSES, NAMESPACE_CUSTOMERS)

T = TypeVar("T")


class BlobStore(Protocol):
    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, blob: str) -> None:
        ...


class MemoryBlobStore:
    """Dict-backed store for app-less use and tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.blobs: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class SqlBlobStore:
    """
    Store backed by the ledger_blobs table.

    Must be used inside an application context.
    """

    def load(self, key: str) -> Optional[str]:
        try:
            row = db.session.get(LedgerBlob, key)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceReadError(f"Failed to read '{key}': {exc}") from exc
        return None if row is None else row.blob

    def save(self, key: str, blob: str) -> None:
        try:
            row = db.session.get(LedgerBlob, key)
            if row is None:
                db.session.add(LedgerBlob(key=key, blob=blob))
            else:
                row.blob = blob
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceWriteError(key, str(exc)) from exc


def serialize_records(records: Iterable) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False)


def deserialize_records(blob: str, factory: Callable[[dict, int], T]) -> list[T]:
    data = json.loads(blob)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")
    records = []
    seen_ids: set[int] = set()
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"record {index} is not an object")
        record = factory(item, index)
        if record.id in seen_ids:
            raise ValueError(f"duplicate id {record.id}")
        seen_ids.add(record.id)
        records.append(record)
    return records


class PersistenceAdapter:
    def __init__(self, store: BlobStore, *, key_prefix: str = ""):
        self.store = store
        self.key_prefix = key_prefix

    def key_for(self, namespace: str) -> str:
        return f"{self.key_prefix}{namespace}"

    def load(self, namespace: str, factory: Callable[[dict, int], T]) -> list[T]:
        """
        Load one namespace. Never raises: absent, unreadable or malformed data
        yields an empty list.

        factory receives each record dict and its position in the array.
        """
        key = self.key_for(namespace)
        try:
            blob = self.store.load(key)
        except PersistenceReadError:
            logger.warning("Could not read namespace %s; starting empty", key, exc_info=True)
            return []
        except Exception:
            # Stores other than SqlBlobStore raise their own error types
            logger.warning("Store failed reading namespace %s; starting empty", key, exc_info=True)
            return []

        if blob is None:
            return []

        try:
            return deserialize_records(blob, factory)
        except (ValueError, KeyError, TypeError):
            # json.JSONDecodeError is a ValueError
            logger.warning("Discarding malformed namespace %s; starting empty", key, exc_info=True)
            return []

    def save(self, namespace: str, records: Iterable) -> Optional[PersistenceWriteError]:
        """Write a full snapshot; returns the failure instead of raising it."""
        key = self.key_for(namespace)
        blob = serialize_records(records)
        try:
            self.store.save(key, blob)
        except PersistenceWriteError as exc:
            logger.warning("Snapshot of %s not saved: %s", key, exc)
            return exc
        except Exception as exc:
            logger.warning("Snapshot of %s not saved", key, exc_info=True)
            return PersistenceWriteError(key, str(exc))
        return None
