"""
Ledger Aggregates

DESIGN DECISION: Nothing here is cached. Every aggregate is one pass over
the ledger, recomputed on each call. At personal-finance volumes that is
instant, and it means a total can never disagree with the list it was
computed from.
"""

from decimal import Decimal
from typing import Iterable, Mapping

from flow_ledger.models.transaction import (
    BudgetStatus,
    CategoryTotal,
    MonthlyTotals,
    Totals,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def sum_by_type(
    transactions: Iterable[Transaction],
    tx_type: TransactionType,
) -> Decimal:
    return sum((t.amount for t in transactions if t.type is tx_type), ZERO)


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Income, expenses and the balance between them."""
    income = ZERO
    expenses = ZERO
    for t in transactions:
        if t.is_income:
            income += t.amount
        else:
            expenses += t.amount
    return Totals(income=income, expenses=expenses, balance=income - expenses)


def month_prefix(year: int, month: int) -> str:
    """ISO prefix of every date in a month, e.g. '2026-03'."""
    return f"{year:04d}-{month:02d}"


def compute_monthly_totals(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> MonthlyTotals:
    """
    Totals for one calendar month.

    Matching is a prefix test on the ISO date string, which is exact
    because ISO dates sort in calendar order.
    """
    prefix = month_prefix(year, month)
    in_month = [t for t in transactions if t.date.isoformat().startswith(prefix)]
    return MonthlyTotals(
        year=year,
        month=month,
        income=sum_by_type(in_month, TransactionType.INCOME),
        expenses=sum_by_type(in_month, TransactionType.EXPENSE),
    )


def compute_category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Expense totals per category, largest first.

    Categories tie-break in the order they were first seen in the ledger
    (dicts keep insertion order and sorted() is stable). Categories with
    no expenses do not appear.
    """
    groups: dict[str, Decimal] = {}
    for t in transactions:
        if not t.is_expense:
            continue
        groups[t.category] = groups.get(t.category, ZERO) + t.amount

    rows = [CategoryTotal(category, total) for category, total in groups.items() if total > 0]
    return sorted(rows, key=lambda row: row.total, reverse=True)


def spent_in_category(transactions: Iterable[Transaction], category: str) -> Decimal:
    return sum(
        (
            t.amount
            for t in transactions
            if t.is_expense and t.category == category
        ),
        ZERO,
    )


def compute_budget_status(
    transactions: Iterable[Transaction],
    budgets: Mapping[str, Decimal],
    category: str,
) -> BudgetStatus:
    """
    Spending against one category's budget.

    remaining goes negative when over budget. percentage is 0 for
    categories without a budget instead of dividing by zero.
    """
    spent = spent_in_category(transactions, category)
    budget = budgets.get(category, ZERO)
    percentage = spent / budget * HUNDRED if budget > 0 else ZERO
    return BudgetStatus(
        category=category,
        spent=spent,
        budget=budget,
        remaining=budget - spent,
        percentage=percentage,
    )
