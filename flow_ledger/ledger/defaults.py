"""
First-run Seed Data

Constants loaded when storage holds nothing yet, so a new user sees a
populated dashboard instead of empty cards.
"""

from decimal import Decimal

from flow_ledger.models.transaction import TransactionInput, TransactionType


# Newest first, the same order the ledger keeps
DEFAULT_TRANSACTIONS: tuple[TransactionInput, ...] = (
    TransactionInput(
        description="Monthly Salary",
        amount="5000",
        type=TransactionType.INCOME,
        category="Salary",
        date="2026-03-01",
        notes="",
        is_recurring=True,
    ),
    TransactionInput(
        description="Rent Payment",
        amount="1500",
        type=TransactionType.EXPENSE,
        category="Housing",
        date="2026-03-01",
        notes="March rent",
        is_recurring=True,
    ),
    TransactionInput(
        description="Weekly Groceries",
        amount="150",
        type=TransactionType.EXPENSE,
        category="Food",
        date="2026-02-27",
        notes="",
        is_recurring=False,
    ),
    TransactionInput(
        description="Freelance Project",
        amount="800",
        type=TransactionType.INCOME,
        category="Freelance",
        date="2026-02-25",
        notes="Website redesign",
        is_recurring=False,
    ),
    TransactionInput(
        description="Electric Bill",
        amount="95.40",
        type=TransactionType.EXPENSE,
        category="Utilities",
        date="2026-02-20",
        notes="",
        is_recurring=True,
    ),
)

DEFAULT_BUDGETS: dict[str, Decimal] = {
    "Housing": Decimal("1600"),
    "Food": Decimal("500"),
    "Transportation": Decimal("200"),
    "Utilities": Decimal("250"),
    "Entertainment": Decimal("100"),
    "Healthcare": Decimal("150"),
    "Shopping": Decimal("200"),
    "Dining": Decimal("150"),
    "Education": Decimal("100"),
}
