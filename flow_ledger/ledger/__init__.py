"""Ledger engine package."""

from flow_ledger.ledger.defaults import DEFAULT_BUDGETS, DEFAULT_TRANSACTIONS
from flow_ledger.ledger.engine import (
    DEFAULT_BUDGETS_KEY,
    DEFAULT_TRANSACTIONS_KEY,
    LedgerEngine,
)

__all__ = [
    "DEFAULT_BUDGETS",
    "DEFAULT_BUDGETS_KEY",
    "DEFAULT_TRANSACTIONS",
    "DEFAULT_TRANSACTIONS_KEY",
    "LedgerEngine",
]
