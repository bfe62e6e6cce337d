"""
Data Models Package

This package contains all Pydantic models used by Flow Ledger.
All data flowing through the engine must conform to these schemas.
"""

from flow_ledger.models.transaction import (
    ALL,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    OTHER_CATEGORY,
    BudgetStatus,
    CategoryTotal,
    ExportRow,
    MonthlyTotals,
    SortOrder,
    Totals,
    Transaction,
    TransactionFilter,
    TransactionInput,
    TransactionType,
    ValidationIssue,
    categories_for,
)
from flow_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "ALL",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "OTHER_CATEGORY",
    "BudgetStatus",
    "CategoryTotal",
    "ExportRow",
    "MonthlyTotals",
    "SortOrder",
    "Totals",
    "Transaction",
    "TransactionFilter",
    "TransactionInput",
    "TransactionType",
    "ValidationIssue",
    "categories_for",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
