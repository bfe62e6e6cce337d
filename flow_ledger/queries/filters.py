"""
Transaction Filtering and Sorting

Pure functions over a sequence of transactions. They never mutate their
input; every call returns a new list.

Filters combine with AND. Sorting is stable, so transactions that tie on
the sort key keep their ledger order.
"""

from typing import Callable, Iterable, Optional

from flow_ledger.models.transaction import (
    ALL,
    SortOrder,
    Transaction,
    TransactionFilter,
)


def matches_text(transaction: Transaction, text: str) -> bool:
    """Case-insensitive substring match on description or notes."""
    needle = text.strip().casefold()
    if not needle:
        return True
    return (
        needle in transaction.description.casefold()
        or needle in transaction.notes.casefold()
    )


def matches_filter(transaction: Transaction, criteria: TransactionFilter) -> bool:
    """Check one transaction against every filter."""
    if not matches_text(transaction, criteria.text):
        return False
    if criteria.category != ALL and transaction.category != criteria.category:
        return False
    if criteria.type != ALL and transaction.type != criteria.type:
        return False
    if criteria.start_date and transaction.date < criteria.start_date:
        return False
    if criteria.end_date and transaction.date > criteria.end_date:
        return False
    return True


# Sort key and direction per ordering
_SORT_KEYS: dict[SortOrder, tuple[Callable[[Transaction], object], bool]] = {
    SortOrder.DATE_DESC: (lambda t: t.date, True),
    SortOrder.DATE_ASC: (lambda t: t.date, False),
    SortOrder.AMOUNT_DESC: (lambda t: t.amount, True),
    SortOrder.AMOUNT_ASC: (lambda t: t.amount, False),
    SortOrder.DESCRIPTION_ASC: (lambda t: t.description.casefold(), False),
    SortOrder.DESCRIPTION_DESC: (lambda t: t.description.casefold(), True),
}


def sort_transactions(
    transactions: Iterable[Transaction],
    order: SortOrder = SortOrder.DATE_DESC,
) -> list[Transaction]:
    """Return a sorted copy. Ties keep their incoming order."""
    key, reverse = _SORT_KEYS[SortOrder(order)]
    return sorted(transactions, key=key, reverse=reverse)


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: Optional[TransactionFilter] = None,
    order: SortOrder = SortOrder.DATE_DESC,
) -> list[Transaction]:
    """Apply the filters, then the sort."""
    criteria = criteria or TransactionFilter()
    matched = [t for t in transactions if matches_filter(t, criteria)]
    return sort_transactions(matched, order)
