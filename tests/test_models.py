"""
Tests for Flow Ledger models

Test strategy:
1. Unit tests for individual components (models, validators, queries)
2. Engine tests against in-memory storage
3. No real Google Sheets calls in tests (use mocks)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from flow_ledger.models.transaction import (
    ALL,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    MAX_AMOUNT,
    BudgetStatus,
    CategoryTotal,
    MonthlyTotals,
    SortOrder,
    Transaction,
    TransactionFilter,
    TransactionInput,
    TransactionType,
    ValidationIssue,
    categories_for,
    decimal_places,
    is_storable_amount,
)
from flow_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation with defaults."""
        tx = Transaction(
            description="Coffee",
            amount=Decimal("4.50"),
            type=TransactionType.EXPENSE,
            category="Dining",
            date=date(2026, 3, 1),
        )
        assert tx.description == "Coffee"
        assert tx.amount == Decimal("4.50")
        assert tx.notes == ""
        assert tx.is_recurring is False
        assert tx.id is not None

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        tx = Transaction(
            description="  Coffee  ",
            amount=Decimal("4.50"),
            type=TransactionType.EXPENSE,
            category="Dining",
        )
        assert tx.description == "Coffee"

    def test_transaction_rejects_blank_description(self):
        with pytest.raises(ValueError):
            Transaction(
                description="   ",
                amount=Decimal("1"),
                type=TransactionType.EXPENSE,
            )

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (Decimal("0"), Decimal("-5")):
            with pytest.raises(ValueError):
                Transaction(
                    description="Test",
                    amount=amount,
                    type=TransactionType.EXPENSE,
                )

    def test_transaction_category_must_match_type(self):
        """An income transaction cannot use an expense-only category."""
        with pytest.raises(ValueError, match="not valid for income"):
            Transaction(
                description="Paycheck",
                amount=Decimal("100"),
                type=TransactionType.INCOME,
                category="Dining",
            )

    def test_other_is_valid_for_both_types(self):
        for tx_type in TransactionType:
            tx = Transaction(description="Misc", amount=Decimal("1"), type=tx_type)
            assert tx.category == "Other"

    def test_transaction_is_frozen(self):
        tx = Transaction(description="Coffee", amount=Decimal("4.5"), type=TransactionType.EXPENSE)
        with pytest.raises(ValueError):
            tx.amount = Decimal("10")

    def test_type_labels(self):
        assert TransactionType.INCOME.label == "Income"
        assert TransactionType.EXPENSE.label == "Expense"

    def test_direction_helpers(self):
        tx = Transaction(description="Pay", amount=Decimal("1"), type=TransactionType.INCOME)
        assert tx.is_income is True
        assert tx.is_expense is False

    def test_amount_must_be_whole_cents(self):
        for amount in ("0.001", "1000000000000", "12345678.123456789"):
            with pytest.raises(ValueError):
                Transaction(
                    description="Test",
                    amount=Decimal(amount),
                    type=TransactionType.EXPENSE,
                )


class TestAmountBounds:
    """Tests for the storable amount helpers."""

    def test_decimal_places_ignores_trailing_zeros(self):
        assert decimal_places(Decimal("4.50")) == 1
        assert decimal_places(Decimal("4.00")) == 0
        assert decimal_places(Decimal("1E+3")) == 0
        assert decimal_places(Decimal("0E-10")) == 0
        assert decimal_places(Decimal("0.001")) == 3

    def test_is_storable_amount(self):
        assert is_storable_amount(Decimal("0"))
        assert is_storable_amount(MAX_AMOUNT)
        assert not is_storable_amount(MAX_AMOUNT + Decimal("0.01"))
        assert not is_storable_amount(Decimal("-1"))
        assert not is_storable_amount(Decimal("NaN"))
        assert not is_storable_amount(Decimal("1E-400"))


class TestVocabularies:
    """Tests for the category vocabularies."""

    def test_categories_for_type(self):
        assert categories_for(TransactionType.EXPENSE) == EXPENSE_CATEGORIES
        assert categories_for(TransactionType.INCOME) == INCOME_CATEGORIES

    def test_expected_categories_exist(self):
        for cat in ("Housing", "Food", "Dining", "Utilities", "Other"):
            assert cat in EXPENSE_CATEGORIES
        for cat in ("Salary", "Freelance", "Other"):
            assert cat in INCOME_CATEGORIES

    def test_sort_order_values(self):
        assert SortOrder("amount-desc") is SortOrder.AMOUNT_DESC
        assert SortOrder.DATE_DESC.value == "date-desc"


class TestTransactionInput:

    def test_keeps_raw_values(self):
        raw = TransactionInput(description="Coffee", amount="4.50", date="2026-03-01")
        assert raw.amount == "4.50"
        assert raw.date == "2026-03-01"
        assert raw.type == TransactionType.EXPENSE

    def test_ignores_unknown_fields(self):
        raw = TransactionInput.model_validate({"description": "x", "colour": "red"})
        assert raw.description == "x"


class TestTransactionFilter:
    """Tests for the query filter model."""

    def test_defaults_match_everything(self):
        f = TransactionFilter()
        assert f.text == ""
        assert f.category == ALL
        assert f.type == ALL
        assert f.start_date is None
        assert f.end_date is None

    def test_type_is_parsed(self):
        assert TransactionFilter(type="Expense").type is TransactionType.EXPENSE
        assert TransactionFilter(type="All").type == ALL

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            TransactionFilter(type="transfer")

    def test_category_is_canonicalised(self):
        assert TransactionFilter(category="dining").category == "Dining"
        assert TransactionFilter(category=" SALARY ").category == "Salary"
        assert TransactionFilter(category="all").category == ALL
        assert TransactionFilter(category="Crypto").category == "Crypto"

    def test_blank_dates_become_none(self):
        f = TransactionFilter(start_date="", end_date="2026-03-31")
        assert f.start_date is None
        assert f.end_date == date(2026, 3, 31)


class TestAggregateModels:

    def test_category_total_is_a_tuple(self):
        row = CategoryTotal("Dining", Decimal("4.5"))
        assert row == ("Dining", Decimal("4.5"))

    def test_monthly_net(self):
        m = MonthlyTotals(year=2026, month=3, income=Decimal("100"), expenses=Decimal("40"))
        assert m.net == Decimal("60")

    def test_monthly_month_bounds(self):
        with pytest.raises(ValueError):
            MonthlyTotals(year=2026, month=13)

    def test_budget_status_over_budget(self):
        status = BudgetStatus(
            category="Dining",
            spent=Decimal("110"),
            budget=Decimal("100"),
            remaining=Decimal("-10"),
            percentage=Decimal("110"),
        )
        assert status.over_budget is True

    def test_validation_issue_severity_pattern(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="missing", message="m", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Added expense",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            description="Budget set",
            details={"category": "Dining", "amount": "$100.00"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_set"
        assert log_dict["details"]["category"] == "Dining"

    def test_builder_transaction_added(self):
        tx_id = uuid4()
        event = AuditEventBuilder.transaction_added(
            transaction_id=tx_id,
            description="Coffee",
            amount="$4.50",
            tx_type="expense",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.entity_id == tx_id
        assert event.is_user_action is True
        assert "Coffee" in event.description

    def test_builder_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("flow_budgets", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.details["key"] == "flow_budgets"

    def test_builder_unknown_delete(self):
        event = AuditEventBuilder.transaction_deleted(None, existed=False)
        assert event.entity_id is None
        assert event.details["existed"] is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
