"""Query and aggregate package."""

from flow_ledger.queries.aggregates import (
    compute_budget_status,
    compute_category_breakdown,
    compute_monthly_totals,
    compute_totals,
    month_prefix,
    spent_in_category,
)
from flow_ledger.queries.filters import (
    filter_transactions,
    matches_filter,
    matches_text,
    sort_transactions,
)

__all__ = [
    "compute_budget_status",
    "compute_category_breakdown",
    "compute_monthly_totals",
    "compute_totals",
    "month_prefix",
    "spent_in_category",
    "filter_transactions",
    "matches_filter",
    "matches_text",
    "sort_transactions",
]
