from __future__ import annotations

from ..extensions import db
from ..time_utils import utcnow


class LedgerBlob(db.Model):
    """
    Durable key-value row backing the ledger namespaces.

    One row per namespace key; blob holds the whole serialized collection and
    is replaced on every write.
    """
    __tablename__ = "ledger_blobs"

    key = db.Column(db.String(128), primary_key=True)
    blob = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<LedgerBlob key={self.key!r} bytes={len(self.blob or '')}>"
