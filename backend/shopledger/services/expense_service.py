# Overview: Expense ledger; outflows independent of products and sales.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import NotFoundError
from ..models import Expense
from ..time_utils import utcnow
from ..validation import clean_expense
from .persistence_service import NAMESPACE_EXPENSES
from .results import CommandResult

if TYPE_CHECKING:
    from .state import LedgerState


class ExpenseLedger:
    def __init__(self):
        self._expenses: dict[int, Expense] = {}

    def __len__(self) -> int:
        return len(self._expenses)

    def replace(self, expenses: Iterable[Expense]) -> None:
        self._expenses = {e.id: e for e in expenses}

    def next_id(self) -> int:
        return max(self._expenses, default=0) + 1

    def append(
        self,
        category: str,
        amount: Decimal,
        description: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> Expense:
        expense = Expense(
            id=self.next_id(),
            category=category,
            amount=amount,
            description=description,
            timestamp=timestamp or utcnow(),
        )
        self._expenses[expense.id] = expense
        return expense

    def get(self, expense_id: int) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    def delete(self, expense_id: int) -> Expense:
        expense = self._expenses.pop(expense_id, None)
        if expense is None:
            raise NotFoundError("Expense", expense_id)
        return expense

    def list_all(self) -> list[Expense]:
        return list(self._expenses.values())


def add_expense(ledger: LedgerState, payload: dict) -> CommandResult:
    """Record an expense submitted through the expense form."""
    fields = clean_expense(payload)
    with ledger.command():
        expense = ledger.expenses.append(fields.category, fields.amount, fields.description)
        warnings = ledger.snapshot(NAMESPACE_EXPENSES)
    return CommandResult(expense, warnings)


def add_quick_expense(
    ledger: LedgerState,
    category: str,
    amount,
    description: Optional[str] = None,
) -> CommandResult:
    """
    One-step expense entry (quick-add buttons, CLI).

    Takes the fields as arguments; the expense form rules still apply, so a
    blank category or an amount that is not greater than zero is refused.
    """
    return add_expense(ledger, {"category": category, "amount": amount, "description": description})


def delete_expense(ledger: LedgerState, expense_id: int) -> CommandResult:
    with ledger.command():
        expense = ledger.expenses.delete(expense_id)
        warnings = ledger.snapshot(NAMESPACE_EXPENSES)
    return CommandResult(expense, warnings)


def list_expenses(ledger: LedgerState) -> list[Expense]:
    return ledger.expenses.list_all()


def expense_categories(ledger: LedgerState, suggested: Iterable[str] = ()) -> list[str]:
    """Configured suggestions first, then any other category already used."""
    categories = list(dict.fromkeys(suggested))
    for expense in ledger.expenses.list_all():
        if expense.category not in categories:
            categories.append(expense.category)
    return categories
