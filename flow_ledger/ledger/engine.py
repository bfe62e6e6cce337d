"""
Ledger Engine

The single owner of the ledger state: the transaction list and the
budget map. Everything the UI shows is computed from this object on
demand.

DESIGN DECISION: The engine is an explicit object with injected storage,
not module-level state. It loads once at construction and saves after
every mutation.

GUARANTEES:
- Validation happens before any state changes (all-or-nothing)
- Aggregates are recomputed from the current ledger on every call
- Callers only ever get copies or frozen records, never the live list
- A failed save is logged and does not undo or block the mutation
- Every mutation is saved before it is audited

Single-threaded: the engine has no lock. Callers that share one engine
across threads must serialize access themselves.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, Union
from uuid import UUID, uuid4

from pydantic import ValidationError as PydanticValidationError

from flow_ledger.audit import AuditLogger
from flow_ledger.errors import NotFoundError, ValidationError
from flow_ledger.formatting import format_currency
from flow_ledger.ledger.defaults import DEFAULT_BUDGETS, DEFAULT_TRANSACTIONS
from flow_ledger.models.transaction import (
    EXPENSE_CATEGORIES,
    BudgetStatus,
    CategoryTotal,
    ExportRow,
    MonthlyTotals,
    SortOrder,
    Totals,
    Transaction,
    TransactionFilter,
    TransactionInput,
    ValidationIssue,
)
from flow_ledger.queries.aggregates import (
    compute_budget_status,
    compute_category_breakdown,
    compute_monthly_totals,
    compute_totals,
)
from flow_ledger.queries.filters import filter_transactions
from flow_ledger.services.serializer import (
    dump_budgets,
    dump_transactions,
    load_budgets,
    load_transactions,
)
from flow_ledger.services.storage import KeyValueStorageInterface, StorageError
from flow_ledger.validation import TransactionValidator


TransactionId = Union[UUID, str]
RawInput = Union[TransactionInput, Mapping[str, Any]]

DEFAULT_TRANSACTIONS_KEY = "flow_transactions"
DEFAULT_BUDGETS_KEY = "flow_budgets"

# Inline messages for raw input that could not even be read
_INPUT_FIELD_MESSAGES = {
    "description": "description required",
    "amount": "invalid amount",
    "date": "date required",
    "type": "invalid type",
    "category": "invalid category",
    "notes": "invalid notes",
    "is_recurring": "invalid recurring flag",
}


def _issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        field = str(err["loc"][0]) if err.get("loc") else "input"
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message=_INPUT_FIELD_MESSAGES.get(field, f"invalid {field}"),
            suggested_fix=err.get("msg"),
        ))
    return issues


class LedgerEngine:
    """
    Owns the transactions and budgets and answers every question about them.

    Usage:
        engine = LedgerEngine(InMemoryStorage())
        engine.add({"description": "Coffee", "amount": "4.50",
                    "type": "expense", "category": "Dining",
                    "date": "2026-03-01"})
        engine.totals().balance
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        transactions_key: str = DEFAULT_TRANSACTIONS_KEY,
        budgets_key: str = DEFAULT_BUDGETS_KEY,
        currency: str = "USD",
        seed_defaults: bool = True,
        clock: Callable[[], date] = date.today,
    ):
        """
        Build the engine and load its state from storage.

        Args:
            storage: Backend the two documents are loaded from and saved to
            audit_logger: Where mutations are logged. A private one is
                          created if omitted.
            validator: Form input validator
            transactions_key: Storage key of the transaction list
            budgets_key: Storage key of the budget map
            currency: ISO code used when formatting amounts for logs
            seed_defaults: Seed the default data when a key was never saved
            clock: Source of "today" for transactions added without a date

        Raises:
            StorageError: If storage could not be read, or holds a
                          document that is not valid JSON.
                          Logged as a system error first.
        """
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or TransactionValidator()
        self._transactions_key = transactions_key
        self._budgets_key = budgets_key
        self._currency = currency
        self._clock = clock

        self._transactions: list[Transaction] = []
        self._budgets: dict[str, Decimal] = {}

        try:
            self._load(seed_defaults)
        except StorageError as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"operation": "load"},
            )
            raise

    # =========================================================================
    # LOADING AND PERSISTENCE
    # =========================================================================

    def _load(self, seed_defaults: bool) -> None:
        """Load both documents, seeding whichever was never saved."""
        payload = self._storage.load(self._transactions_key)
        if payload is None:
            if seed_defaults:
                today = self._clock()
                self._transactions = [
                    self._build(self._validator.validate_transaction(raw, today=today))
                    for raw in DEFAULT_TRANSACTIONS
                ]
                self._audit_logger.log_ledger_seeded(
                    self._transactions_key, len(self._transactions)
                )
                self._save_transactions()
        else:
            self._transactions = load_transactions(
                payload,
                on_skip=lambda index, reason: self._audit_logger.log_record_skipped(
                    self._transactions_key, str(index), reason
                ),
            )

        payload = self._storage.load(self._budgets_key)
        if payload is None:
            if seed_defaults:
                self._budgets = dict(DEFAULT_BUDGETS)
                self._audit_logger.log_ledger_seeded(self._budgets_key, len(self._budgets))
                self._save_budgets()
        else:
            loaded = load_budgets(
                payload,
                on_skip=lambda category, reason: self._audit_logger.log_record_skipped(
                    self._budgets_key, category, reason
                ),
            )
            for category, amount in loaded.items():
                if category in EXPENSE_CATEGORIES:
                    self._budgets[category] = amount
                else:
                    self._audit_logger.log_record_skipped(
                        self._budgets_key, category, "not an expense category"
                    )

        self._audit_logger.log_ledger_loaded(len(self._transactions), len(self._budgets))

    def _persist(self, key: str, payload: str) -> None:
        # In-memory state is already updated; a failed save is reported, not raised
        try:
            self._storage.save(key, payload)
        except StorageError as e:
            self._audit_logger.log_save_failed(key, str(e))

    def _save_transactions(self) -> None:
        self._persist(self._transactions_key, dump_transactions(self._transactions))

    def _save_budgets(self) -> None:
        self._persist(self._budgets_key, dump_budgets(self._budgets))

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _fail(self, operation: str, error: ValidationError) -> ValidationError:
        self._audit_logger.log_validation_failed(
            operation, [issue.model_dump() for issue in error.issues]
        )
        return error

    def _read_input(self, data: RawInput, operation: str) -> TransactionInput:
        """Accept a TransactionInput or a plain dict of form values."""
        if isinstance(data, TransactionInput):
            return data
        if not isinstance(data, Mapping):
            issues = [ValidationIssue(
                field="input",
                issue_type="invalid_format",
                message="invalid input",
            )]
        else:
            try:
                return TransactionInput.model_validate(dict(data))
            except PydanticValidationError as e:
                issues = _issues_from_pydantic(e)
        raise self._fail(operation, ValidationError(issues[0].message, issues))

    def _validate(self, data: RawInput, operation: str) -> dict[str, Any]:
        raw = self._read_input(data, operation)
        try:
            return self._validator.validate_transaction(raw, today=self._clock())
        except ValidationError as e:
            raise self._fail(operation, e)

    def _build(self, fields: dict[str, Any], **identity: Any) -> Transaction:
        try:
            return Transaction(**fields, **identity)
        except PydanticValidationError as e:
            issues = _issues_from_pydantic(e)
            raise ValidationError(issues[0].message, issues)

    def _new_id(self) -> UUID:
        existing = {t.id for t in self._transactions}
        new_id = uuid4()
        while new_id in existing:
            new_id = uuid4()
        return new_id

    def _coerce_id(self, transaction_id: TransactionId) -> Optional[UUID]:
        if isinstance(transaction_id, UUID):
            return transaction_id
        try:
            return UUID(str(transaction_id))
        except ValueError:
            return None

    def _index_of(self, transaction_id: TransactionId) -> Optional[int]:
        wanted = self._coerce_id(transaction_id)
        if wanted is None:
            return None
        for index, t in enumerate(self._transactions):
            if t.id == wanted:
                return index
        return None

    def _format(self, amount: Decimal) -> str:
        return format_currency(amount, self._currency)

    # =========================================================================
    # STATE SNAPSHOTS
    # =========================================================================

    @property
    def transactions(self) -> list[Transaction]:
        """The ledger in stored order (newest added first). A copy."""
        return list(self._transactions)

    @property
    def budgets(self) -> dict[str, Decimal]:
        """Category budgets. A copy."""
        return dict(self._budgets)

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def __len__(self) -> int:
        return len(self._transactions)

    def get(self, transaction_id: TransactionId) -> Transaction:
        """
        Look up one transaction.

        Raises:
            NotFoundError: If no transaction has that id
        """
        index = self._index_of(transaction_id)
        if index is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        return self._transactions[index]

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add(self, data: RawInput) -> Transaction:
        """
        Validate form input and add a transaction at the head of the ledger.

        Raises:
            ValidationError: description required / invalid amount /
                             date required / invalid type / invalid category
        """
        fields = self._validate(data, "add")
        transaction = self._build(fields, id=self._new_id())

        self._transactions.insert(0, transaction)
        self._save_transactions()

        self._audit_logger.log_transaction_added(
            transaction_id=transaction.id,
            description=transaction.description,
            amount=self._format(transaction.amount),
            tx_type=transaction.type.value,
        )
        return transaction

    def edit(self, transaction_id: TransactionId, data: RawInput) -> Transaction:
        """
        Replace a transaction's fields, keeping its id and position.

        Raises:
            NotFoundError: If no transaction has that id
            ValidationError: Same rules as add
        """
        index = self._index_of(transaction_id)
        if index is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        existing = self._transactions[index]
        fields = self._validate(data, "edit")
        updated = self._build(fields, id=existing.id, created_at=existing.created_at)

        changed = [name for name, value in fields.items() if getattr(existing, name) != value]
        self._transactions[index] = updated
        self._save_transactions()

        self._audit_logger.log_transaction_updated(updated.id, changed)
        return updated

    def delete(self, transaction_id: TransactionId) -> None:
        """Remove a transaction. Unknown ids are ignored."""
        index = self._index_of(transaction_id)
        removed = self._transactions.pop(index) if index is not None else None
        self._save_transactions()

        if removed is None:
            self._audit_logger.log_transaction_deleted(
                self._coerce_id(transaction_id), existed=False
            )
        else:
            self._audit_logger.log_transaction_deleted(removed.id, existed=True)

    def set_budget(self, category: str, amount: Any) -> None:
        """
        Set (or replace) the budget of an expense category.

        Raises:
            ValidationError: invalid amount (negative, not a number) or
                             invalid category (not an expense category)
        """
        try:
            category, parsed = self._validator.validate_budget(category, amount)
        except ValidationError as e:
            raise self._fail("set_budget", e)

        previous = self._budgets.get(category)
        self._budgets[category] = parsed
        self._save_budgets()

        self._audit_logger.log_budget_set(
            category=category,
            amount=self._format(parsed),
            previous=self._format(previous) if previous is not None else None,
        )

    # =========================================================================
    # AGGREGATES
    # =========================================================================

    def totals(self) -> Totals:
        """Income, expenses and balance over the whole ledger."""
        return compute_totals(self._transactions)

    def monthly_totals(self, year: int, month: int) -> MonthlyTotals:
        """
        Income and expenses for one calendar month.

        Raises:
            ValidationError: If month is not 1-12 or year is not 1-9999
        """
        if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
            raise ValidationError("invalid year", [ValidationIssue(
                field="year", issue_type="invalid_value", message="invalid year",
            )])
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise ValidationError("invalid month", [ValidationIssue(
                field="month", issue_type="invalid_value", message="invalid month",
            )])
        return compute_monthly_totals(self._transactions, year, month)

    def category_breakdown(self) -> list[CategoryTotal]:
        """Expense totals per category, largest first."""
        return compute_category_breakdown(self._transactions)

    def budget_status(self, category: str) -> BudgetStatus:
        """Spending against one category's budget (0 if none is set)."""
        return compute_budget_status(self._transactions, self._budgets, category)

    def budget_overview(self) -> list[BudgetStatus]:
        """Status of every category that has a budget, in budget order."""
        return [self.budget_status(category) for category in self._budgets]

    # =========================================================================
    # QUERIES
    # =========================================================================

    def query(
        self,
        criteria: Optional[Union[TransactionFilter, Mapping[str, Any]]] = None,
        sort: Union[SortOrder, str] = SortOrder.DATE_DESC,
    ) -> list[Transaction]:
        """
        Filtered and sorted view of the ledger.

        Returns a new list; the ledger itself is never reordered.

        Raises:
            ValidationError: If the filter or sort order is malformed
        """
        if criteria is None:
            criteria = TransactionFilter()
        elif not isinstance(criteria, TransactionFilter):
            try:
                criteria = TransactionFilter.model_validate(dict(criteria))
            except PydanticValidationError as e:
                issues = _issues_from_pydantic(e)
                raise ValidationError("invalid filter", issues)

        try:
            order = SortOrder(sort)
        except ValueError:
            raise ValidationError("invalid sort order", [ValidationIssue(
                field="sort", issue_type="invalid_value", message="invalid sort order",
            )])

        return filter_transactions(self._transactions, criteria, order)

    def export_rows(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> list[ExportRow]:
        """
        Shape transactions into export rows.

        Columns: Description, Amount, Type, Category, Date, Notes, Recurring.
        Defaults to the whole ledger in stored order.
        """
        source = self._transactions if transactions is None else transactions
        return [
            (
                t.description,
                t.amount,
                t.label,
                t.category,
                t.date.isoformat(),
                t.notes,
                "Yes" if t.is_recurring else "No",
            )
            for t in source
        ]
