"""
Flow Ledger - Source Package

The data layer behind the Flow personal finance tracker: a ledger of
income and expense transactions, per-category budgets, and the derived
totals and breakdowns the UI renders.

DESIGN PRINCIPLES:
1. The engine owns the state, callers only see copies
2. Fail early, fail visibly (typed validation errors)
3. Nothing is cached - every aggregate is recomputed from the ledger
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Flow Team"
