"""
Ledger Serialization

Converts the transaction list and the budget map to and from the JSON
text the storage backends hold.

Format:
- transactions: a JSON list of records with the Transaction fields;
  amounts are JSON numbers and dates ISO strings
- budgets: a JSON object of category -> number

JSON numbers are parsed straight into Decimal, so 4.5 loads as
Decimal("4.5"). Amounts are whole cents with at most 15 significant
digits (see is_storable_amount), which a JSON float carries exactly.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from flow_ledger.models.transaction import (
    Transaction,
    TransactionType,
    is_storable_amount,
)
from flow_ledger.services.storage.interface import StorageError


def _number(value: Decimal) -> Any:
    """Integral amounts as ints, everything else as floats.

    Exact for storable amounts: a float's shortest repr reproduces any
    decimal of up to 15 significant digits.
    """
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def transaction_to_record(transaction: Transaction) -> dict[str, Any]:
    """Convert a Transaction to a JSON-ready record."""
    return {
        "id": str(transaction.id),
        "description": transaction.description,
        "amount": _number(transaction.amount),
        "type": transaction.type.value,
        "category": transaction.category,
        "date": transaction.date.isoformat(),
        "notes": transaction.notes,
        "is_recurring": transaction.is_recurring,
        "created_at": transaction.created_at.isoformat(),
    }


def record_to_transaction(record: Mapping[str, Any]) -> Transaction:
    """
    Convert a stored record back to a Transaction.

    Raises:
        ValueError: If the record is malformed
    """
    try:
        fields: dict[str, Any] = {
            "id": UUID(str(record["id"])),
            "description": record["description"],
            "amount": Decimal(str(record["amount"])),
            "type": TransactionType(record["type"]),
            "category": record.get("category") or "Other",
            "date": date.fromisoformat(record["date"]),
            "notes": record.get("notes") or "",
            "is_recurring": bool(record.get("is_recurring", False)),
        }
        if record.get("created_at"):
            fields["created_at"] = datetime.fromisoformat(record["created_at"])
        return Transaction(**fields)
    except (KeyError, TypeError, ArithmeticError, PydanticValidationError) as e:
        raise ValueError(f"Malformed transaction record: {e}") from e


def dump_transactions(transactions: Sequence[Transaction]) -> str:
    return json.dumps([transaction_to_record(t) for t in transactions])


def load_transactions(
    payload: str,
    on_skip: Optional[Callable[[int, str], None]] = None,
) -> list[Transaction]:
    """
    Parse a stored transaction list.

    Malformed records are skipped (reported through on_skip with their
    index and the reason) so one bad row never loses the whole ledger.

    Raises:
        StorageError: If the payload is not a JSON list at all
    """
    try:
        records = json.loads(payload, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored transactions are not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise StorageError("Stored transactions must be a JSON list")

    transactions = []
    seen_ids: set[UUID] = set()
    for index, record in enumerate(records):
        try:
            if not isinstance(record, dict):
                raise ValueError("record is not an object")
            transaction = record_to_transaction(record)
            if transaction.id in seen_ids:
                raise ValueError(f"duplicate id {transaction.id}")
        except ValueError as e:
            if on_skip:
                on_skip(index, str(e))
            continue
        seen_ids.add(transaction.id)
        transactions.append(transaction)
    return transactions


def dump_budgets(budgets: Mapping[str, Decimal]) -> str:
    return json.dumps({category: _number(amount) for category, amount in budgets.items()})


def load_budgets(
    payload: str,
    on_skip: Optional[Callable[[str, str], None]] = None,
) -> dict[str, Decimal]:
    """
    Parse a stored budget map.

    Entries that are not storable non-negative amounts are skipped.

    Raises:
        StorageError: If the payload is not a JSON object
    """
    try:
        data = json.loads(payload, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored budgets are not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise StorageError("Stored budgets must be a JSON object")

    budgets: dict[str, Decimal] = {}
    for category, value in data.items():
        try:
            if isinstance(value, bool):
                raise ValueError("boolean is not an amount")
            amount = Decimal(str(value))
            if not is_storable_amount(amount):
                raise ValueError(f"invalid budget amount {value!r}")
        except (ArithmeticError, ValueError) as e:
            if on_skip:
                on_skip(category, str(e))
            continue
        budgets[category] = amount
    return budgets
