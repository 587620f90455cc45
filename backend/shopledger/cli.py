# Overview: Flask CLI command groups for ledger inspection, maintenance and quick expenses.

# backend/shopledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to shopledger (PowerShell: $env:FLASK_APP="shopledger").
# - Use: python -m flask <group> <command> [options]
#
# Ledger:
# - python -m flask ledger init-db
#   Create the ledger_blobs table if it does not exist.
# - python -m flask ledger summary
#   Print investment, revenue, cost of sold items, profit, expenses and available cash.
# - python -m flask ledger reload
#   Re-read products, sales, expenses and customers from the database.
# - python -m flask ledger reset --yes
#   DEV/TEST only: empty every collection (deletes all data).
#
# Expenses:
# - python -m flask expenses quick --category Food --amount 10000 [--description "Lunch"]
#   Record an expense in one step.
# - python -m flask expenses list
#   List recorded expenses.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import LedgerError
from .extensions import db
from .services import expense_service, reconciliation_service
from .services.state import current_ledger


def _echo_warnings(result) -> None:
    for warning in result.warnings:
        click.echo(f"WARN {warning}", err=True)


@click.group('ledger')
def ledger_group():
    """Ledger inspection and maintenance commands."""


@ledger_group.command('init-db')
@with_appcontext
def init_db():
    """Create missing tables."""
    db.create_all()
    click.echo("PASS Tables ready.")


@ledger_group.command('summary')
@with_appcontext
def summary():
    """Print the reconciliation figures."""
    currency = current_app.config.get("CURRENCY_LABEL", "")
    figures = reconciliation_service.ledger_summary(current_ledger())

    rows = [
        ("Total investment", figures.total_investment),
        ("Remaining stock value", figures.remaining_stock_value),
        ("Total revenue", figures.total_revenue),
        ("Cost of sold items", figures.cost_of_sold_items),
        ("Profit", figures.profit),
        ("Total expenses", figures.total_expenses),
        ("Available cash", figures.available_cash),
    ]

    click.echo("\n" + "=" * 48)
    for label, value in rows:
        click.echo(f"{label:<24} {value:>14,} {currency}")
    click.echo("=" * 48)
    click.echo(f"Units sold: {figures.total_units_sold} of {figures.total_original_stock}")
    if figures.all_sold:
        click.echo("All stock sold.")
    click.echo("")


@ledger_group.command('reload')
@with_appcontext
def reload_ledger():
    """Discard in-memory state and reload it from the database."""
    ledger = current_ledger().load()
    click.echo(
        f"PASS Loaded {len(ledger.inventory)} products, {len(ledger.sales)} sales, "
        f"{len(ledger.expenses)} expenses, {len(ledger.customers)} customers."
    )


@ledger_group.command('reset')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_ledger(yes):
    """
    DANGER: Remove every product, sale, expense and customer.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    result = current_ledger().clear()
    _echo_warnings(result)
    click.echo("DELETE Ledger emptied.")


@click.group('expenses')
def expenses_group():
    """Expense commands."""


@expenses_group.command('quick')
@click.option('--category', required=True, help='Expense category (any non-blank text)')
@click.option('--amount', required=True, help='Amount greater than zero')
@click.option('--description', default=None, help='Optional note')
@with_appcontext
def quick_expense(category, amount, description):
    """Record an expense in one step."""
    try:
        result = expense_service.add_quick_expense(current_ledger(), category, amount, description)
    except LedgerError as e:
        errors = getattr(e, "errors", None) or {}
        for field, message in errors.items():
            click.echo(f"FAIL {field}: {message}", err=True)
        raise click.ClickException(str(e))

    _echo_warnings(result)
    expense = result.value
    click.echo(f"PASS Expense #{expense.id}: {expense.category} {expense.amount}")


@expenses_group.command('list')
@with_appcontext
def list_expenses():
    """List recorded expenses."""
    expenses = expense_service.list_expenses(current_ledger())
    if not expenses:
        click.echo("No expenses recorded.")
        return

    click.echo(f"{'ID':<5} {'Category':<16} {'Amount':>14} {'When':<20} {'Description'}")
    for expense in expenses:
        click.echo(
            f"{expense.id:<5} {expense.category[:16]:<16} {expense.amount:>14,} "
            f"{str(expense.timestamp)[:19]:<20} {expense.description or '-'}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(ledger_group)
    app.cli.add_command(expenses_group)
