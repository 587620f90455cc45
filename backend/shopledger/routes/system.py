# backend/shopledger/routes/system.py
"""
Health endpoint.

Reports whether the blob table is reachable and how many records each ledger
collection currently holds in memory.
"""

import time
from flask import Blueprint, current_app

from ..extensions import db
from ..models import LedgerBlob
from ..services.state import current_ledger
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        blob_count = db.session.query(LedgerBlob).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"namespaces": blob_count},
        }
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: ledger loaded and database reachable
    - 200 with status "degraded": database unreachable; the in-memory
      ledger still serves commands but snapshots are not being saved
    """
    database_health = check_database_health()
    ledger = current_ledger()

    if database_health["status"] == "healthy":
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    return {
        "status": overall_status,
        "timestamp": to_utc_z(utcnow()),
        "checks": {
            "database": database_health,
            "ledger": {
                "products": len(ledger.inventory),
                "sales": len(ledger.sales),
                "expenses": len(ledger.expenses),
                "customers": len(ledger.customers),
            },
        },
    }, 200
