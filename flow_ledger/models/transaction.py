"""
Core Data Models for Flow Ledger

These models define the schemas for all data flowing through the ledger.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and export
4. Keep the ledger's invariants out of the UI

DESIGN DECISION: A stored Transaction is frozen. Editing produces a new
record with the same id, so nothing outside the engine can change the
ledger behind its back.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS AND VOCABULARIES - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        """Human label used in lists and exports."""
        return "Income" if self is TransactionType.INCOME else "Expense"


OTHER_CATEGORY = "Other"

# Wildcard accepted by the category and type filters
ALL = "All"

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Housing",
    "Food",
    "Transportation",
    "Utilities",
    "Entertainment",
    "Healthcare",
    "Shopping",
    "Dining",
    "Education",
    OTHER_CATEGORY,
)

INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Investments",
    "Gifts",
    OTHER_CATEGORY,
)


def categories_for(tx_type: TransactionType) -> tuple[str, ...]:
    """Category vocabulary allowed for a transaction type."""
    if tx_type is TransactionType.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


# Amounts are whole cents with at most 15 significant digits, so the JSON
# number written to storage reads back as exactly the same value
AMOUNT_DECIMAL_PLACES = 2
MAX_AMOUNT = Decimal("999999999999.99")


def decimal_places(value: Decimal) -> int:
    """Digits after the point, ignoring trailing zeros (4.50 has 1)."""
    if not value.is_finite() or value == 0:
        return 0
    _, digits, exponent = value.as_tuple()
    while digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    return max(0, -exponent)


def is_storable_amount(value: Decimal) -> bool:
    """Zero or positive, finite, at most MAX_AMOUNT and whole cents."""
    return (
        value.is_finite()
        and Decimal("0") <= value <= MAX_AMOUNT
        and decimal_places(value) <= AMOUNT_DECIMAL_PLACES
    )


class SortOrder(str, Enum):
    """Display orderings offered by the transaction list."""
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"
    DESCRIPTION_ASC = "description-asc"
    DESCRIPTION_DESC = "description-desc"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single stored income or expense.

    CRITICAL: Only the engine creates these. Callers hand raw form values
    to the engine (see TransactionInput) and get Transactions back.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID, never reused"
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude, currency agnostic"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        default=OTHER_CATEGORY,
        description="Category from the vocabulary of the transaction type"
    )
    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Calendar date of the transaction"
    )
    notes: str = Field(
        default="",
        max_length=1000,
        description="Free text notes"
    )
    is_recurring: bool = Field(
        default=False,
        description="Informational marker, no scheduling attached"
    )

    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="When the transaction was first added"
    )

    @field_validator('amount')
    @classmethod
    def validate_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        if not is_storable_amount(v):
            raise ValueError(
                f"Amount must be at most {MAX_AMOUNT} in whole cents"
            )
        return v

    @model_validator(mode='after')
    def validate_category(self) -> 'Transaction':
        """Category must belong to the vocabulary of the type."""
        if self.category not in categories_for(self.type):
            raise ValueError(
                f"Category '{self.category}' is not valid for {self.type.value} transactions"
            )
        return self

    @property
    def label(self) -> str:
        return self.type.label

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


class TransactionInput(BaseModel):
    """
    Raw values from the add/edit form.

    Amount and date are kept exactly as the caller sent them (usually
    strings); the validator is responsible for parsing them.
    """
    model_config = ConfigDict(extra="ignore")

    description: Optional[str] = None
    amount: Any = None
    type: Union[TransactionType, str] = TransactionType.EXPENSE
    category: Optional[str] = None
    date: Any = None
    notes: Optional[str] = ""
    is_recurring: bool = False


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Short message shown inline next to the form"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


# =============================================================================
# QUERY MODELS
# =============================================================================

class TransactionFilter(BaseModel):
    """
    Conjunction of filters applied by LedgerEngine.query.

    Defaults match everything: empty text, "All" category and type,
    no date bounds.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(
        default="",
        description="Case-insensitive substring of description or notes"
    )
    category: str = Field(
        default=ALL,
        description="Exact category, or All"
    )
    type: Union[TransactionType, str] = Field(
        default=ALL,
        description="income, expense, or All"
    )
    start_date: Optional[dt.date] = Field(
        default=None,
        description="Inclusive lower bound"
    )
    end_date: Optional[dt.date] = Field(
        default=None,
        description="Inclusive upper bound"
    )

    @field_validator('type', mode='before')
    @classmethod
    def parse_type(cls, v: Any) -> Any:
        if v is None or v == "" or v == ALL:
            return ALL
        if isinstance(v, TransactionType):
            return v
        try:
            return TransactionType(str(v).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown transaction type filter: {v}")

    @field_validator('category', mode='before')
    @classmethod
    def canonical_category(cls, v: Any) -> Any:
        """Blank means All; known categories match ignoring case."""
        if v is None:
            return ALL
        if not isinstance(v, str):
            return v
        wanted = v.strip().casefold()
        if not wanted or wanted == ALL.casefold():
            return ALL
        for name in EXPENSE_CATEGORIES + INCOME_CATEGORIES:
            if name.casefold() == wanted:
                return name
        return v

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def blank_date_is_none(cls, v: Any) -> Any:
        # Date inputs submit an empty string when cleared
        if isinstance(v, str) and not v.strip():
            return None
        return v


# =============================================================================
# AGGREGATE RESULT MODELS
# =============================================================================

class Totals(BaseModel):
    """Summary cards: everything in the ledger."""

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class MonthlyTotals(BaseModel):
    """Income and expenses for one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


class CategoryTotal(NamedTuple):
    """One row of the expense breakdown."""

    category: str
    total: Decimal


class BudgetStatus(BaseModel):
    """Spending against a category budget."""

    category: str
    spent: Decimal
    budget: Decimal
    remaining: Decimal
    percentage: Decimal

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0


# Description, Amount, Type, Category, Date, Notes, Recurring
ExportRow = tuple[str, Decimal, str, str, str, str, str]
