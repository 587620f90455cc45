# backend/shopledger/config.py
from __future__ import annotations
import os


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/shopledger.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///shopledger.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Prepended to the products/sales/expenses namespace keys
    LEDGER_KEY_PREFIX = os.environ.get("LEDGER_KEY_PREFIX", "")

    # Suggestions only; any non-blank category is accepted
    EXPENSE_CATEGORIES = _split_csv(
        os.environ.get("EXPENSE_CATEGORIES", "Food,Rent,Transport,Utilities,Salary,Other")
    )

    CURRENCY_LABEL = os.environ.get("CURRENCY_LABEL", "UZS")
