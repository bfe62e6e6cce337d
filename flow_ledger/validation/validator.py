"""
Form Input Validation

DESIGN DECISION: The UI hands raw form values (strings) to the engine.
Parsing and validation happen here, in one place, before anything is
stored. The validator:

1. Parses amounts and dates from whatever the form submitted
2. Checks every field and collects ALL issues, not just the first
3. Raises a single ValidationError whose message is the first blocking
   issue (that is what the form shows inline)

IMPORTANT: Validation NEVER silently fixes input beyond trimming
whitespace and normalising the case of known categories.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from flow_ledger.errors import ValidationError
from flow_ledger.models.transaction import (
    EXPENSE_CATEGORIES,
    MAX_AMOUNT,
    OTHER_CATEGORY,
    TransactionInput,
    TransactionType,
    ValidationIssue,
    categories_for,
    is_storable_amount,
)


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_DESCRIPTION_LENGTH = 200
MAX_NOTES_LENGTH = 1000


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a form amount into a finite Decimal.

    Returns None for anything that is not a number: empty strings,
    garbage text, NaN, infinities and booleans.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # str() keeps 4.5 as Decimal("4.5") rather than the binary expansion
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO YYYY-MM-DD date. Returns None if malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not ISO_DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        # Well shaped but impossible, e.g. 2026-02-30
        return None


def _match_category(category: str, vocabulary: tuple[str, ...]) -> Optional[str]:
    """Find a category in a vocabulary ignoring case. Returns the canonical name."""
    wanted = category.casefold()
    for name in vocabulary:
        if name.casefold() == wanted:
            return name
    return None


class TransactionValidator:
    """
    Validates raw transaction and budget input.

    Stateless; one instance can be shared by the engine for its lifetime.
    """

    def validate_transaction(
        self,
        raw: TransactionInput,
        today: Optional[date] = None,
    ) -> dict[str, Any]:
        """
        Validate add/edit form input.

        Args:
            raw: Raw form values
            today: Date used when the form left the date out entirely

        Returns:
            Clean field values ready to build a Transaction

        Raises:
            ValidationError: If any field is invalid. Nothing is returned
                            partially.
        """
        issues: list[ValidationIssue] = []

        # Description
        description = (raw.description or "").strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="description required",
                suggested_fix="Enter what the transaction was for",
            ))
        elif len(description) > MAX_DESCRIPTION_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message="description too long",
                suggested_fix=f"Keep it under {MAX_DESCRIPTION_LENGTH} characters",
            ))

        # Amount
        amount = parse_amount(raw.amount)
        if amount is None or amount <= 0 or not is_storable_amount(amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="invalid amount",
                suggested_fix=f"Enter a positive amount in cents, at most {MAX_AMOUNT}",
            ))

        # Date - omitted entirely means today, blank or malformed is an error
        if raw.date is None:
            tx_date = today or date.today()
        else:
            tx_date = parse_date(raw.date)
            if tx_date is None:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message="date required",
                    suggested_fix="Use the YYYY-MM-DD format",
                ))

        # Type
        tx_type: Optional[TransactionType]
        raw_type = raw.type.value if isinstance(raw.type, TransactionType) else str(raw.type)
        try:
            tx_type = TransactionType(raw_type.strip().lower())
        except ValueError:
            tx_type = None
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="invalid type",
                suggested_fix="Choose income or expense",
            ))

        # Category must come from the vocabulary of the type
        category = (raw.category or "").strip() or OTHER_CATEGORY
        if tx_type is not None:
            matched = _match_category(category, categories_for(tx_type))
            if matched is None:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="invalid_value",
                    message="invalid category",
                    suggested_fix=f"'{category}' is not a {tx_type.value} category",
                ))
            else:
                category = matched

        notes = (raw.notes or "").strip()
        if len(notes) > MAX_NOTES_LENGTH:
            issues.append(ValidationIssue(
                field="notes",
                issue_type="too_long",
                message="notes too long",
                suggested_fix=f"Keep notes under {MAX_NOTES_LENGTH} characters",
            ))

        if issues:
            raise ValidationError(issues[0].message, issues)

        return {
            "description": description,
            "amount": amount,
            "type": tx_type,
            "category": category,
            "date": tx_date,
            "notes": notes,
            "is_recurring": raw.is_recurring,
        }

    def validate_budget(self, category: Any, amount: Any) -> tuple[str, Decimal]:
        """
        Validate a set-budget request.

        Budgets may be zero but never negative, and only expense
        categories can carry one.

        Returns: (canonical_category, amount)
        """
        issues: list[ValidationIssue] = []

        matched = None
        if isinstance(category, str) and category.strip():
            matched = _match_category(category.strip(), EXPENSE_CATEGORIES)
        if matched is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message="invalid category",
                suggested_fix="Budgets can only be set for expense categories",
            ))

        parsed = parse_amount(amount)
        if parsed is None or not is_storable_amount(parsed):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="invalid amount",
                suggested_fix=f"Enter zero or a positive amount in cents, at most {MAX_AMOUNT}",
            ))

        if issues:
            raise ValidationError(issues[0].message, issues)

        return matched, parsed
