"""Input validation package."""

from flow_ledger.validation.validator import (
    TransactionValidator,
    parse_amount,
    parse_date,
)

__all__ = ["TransactionValidator", "parse_amount", "parse_date"]
