"""
Ledger Errors

Every failure the engine reports is expected and recoverable: the caller
shows the message and the ledger is left exactly as it was.
"""

from typing import Optional

from flow_ledger.models.transaction import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """
    Malformed or missing input.

    `message` is the first blocking issue, short enough to show inline
    next to the form. `issues` holds everything that was wrong.
    """

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.message = message
        self.issues = issues or []

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


class NotFoundError(LedgerError):
    """Operation referenced a transaction id the ledger does not hold."""
    pass
