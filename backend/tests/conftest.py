"""
Pytest fixtures for ShopLedger backend tests.

Provides an app on an in-memory SQLite database, a test client, and an
app-less ledger backed by a dict store.
"""

import pytest

from shopledger import create_app
from shopledger.errors import PersistenceReadError, PersistenceWriteError
from shopledger.extensions import db
from shopledger.services import inventory_service
from shopledger.services.persistence_service import MemoryBlobStore
from shopledger.services.state import LedgerState


WIDGET = {
    "name": "Widget",
    "costPrice": "100",
    "sellingPrice": "150",
    "discountedPrice": "120",
    "stock": 10,
}

GADGET = {
    "name": "Gadget",
    "costPrice": "40",
    "sellingPrice": "70",
    "discountedPrice": "55",
    "stock": 5,
}


@pytest.fixture(scope='function')
def app():
    """Fresh application (and in-memory database) per test."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def blob_store():
    return MemoryBlobStore()


@pytest.fixture(scope='function')
def ledger(blob_store):
    """Empty ledger persisted to an in-memory dict."""
    return LedgerState.from_store(blob_store)


@pytest.fixture(scope='function')
def widget(ledger):
    return inventory_service.create_product(ledger, dict(WIDGET)).value


@pytest.fixture(scope='function')
def gadget(ledger):
    return inventory_service.create_product(ledger, dict(GADGET)).value


class FailingBlobStore(MemoryBlobStore):
    """Reads work; every write fails the way a broken database would."""

    def save(self, key, blob):
        raise PersistenceWriteError(key, "disk full")


class UnreadableBlobStore(MemoryBlobStore):
    def load(self, key):
        raise PersistenceReadError(f"Failed to read '{key}': connection refused")


class OfflineBlobStore(MemoryBlobStore):
    """A store that raises its own error type instead of the persistence errors."""

    def load(self, key):
        raise OSError("store offline")

    def save(self, key, blob):
        raise OSError("disk gone")
