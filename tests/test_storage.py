"""
Tests for the storage backends and the ledger serializer

Google Sheets is exercised through mocks only.
"""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from flow_ledger.models.transaction import Transaction, TransactionType
from flow_ledger.services.serializer import (
    dump_budgets,
    dump_transactions,
    load_budgets,
    load_transactions,
    record_to_transaction,
    transaction_to_record,
)
from flow_ledger.services.storage import (
    InMemoryStorage,
    JSONFileStorage,
    StorageError,
)
from flow_ledger.services.storage.google_sheets import (
    MAX_CELL_CHARACTERS,
    STATE_COLUMNS,
    GoogleSheetsStorage,
)


def sample_transaction(**overrides):
    fields = dict(
        description="Coffee",
        amount=Decimal("4.5"),
        type=TransactionType.EXPENSE,
        category="Dining",
        date=date(2026, 3, 1),
        notes="flat white",
        is_recurring=False,
    )
    fields.update(overrides)
    return Transaction(**fields)


# =============================================================================
# IN-MEMORY
# =============================================================================

class TestInMemoryStorage:

    def test_missing_key_is_none(self):
        assert InMemoryStorage().load("nothing") is None

    def test_save_then_load(self):
        storage = InMemoryStorage()
        storage.save("k", "[]")
        assert storage.load("k") == "[]"
        assert storage.save_count == 1
        assert storage.keys() == ["k"]

    def test_initial_data_is_copied(self):
        initial = {"k": "v"}
        storage = InMemoryStorage(initial)
        storage.save("k", "w")
        assert initial == {"k": "v"}


# =============================================================================
# JSON FILES
# =============================================================================

class TestJSONFileStorage:
    """Tests for the file backend."""

    def test_missing_file_is_none(self, tmp_path):
        assert JSONFileStorage(tmp_path).load("flow_transactions") is None

    def test_save_creates_directory_and_file(self, tmp_path):
        storage = JSONFileStorage(tmp_path / "nested" / "data")
        storage.save("flow_budgets", '{"Food": 500}')

        path = tmp_path / "nested" / "data" / "flow_budgets.json"
        assert path.read_text(encoding="utf-8") == '{"Food": 500}'
        assert storage.load("flow_budgets") == '{"Food": 500}'

    def test_save_replaces_without_leftovers(self, tmp_path):
        """The temp file is renamed over the target, nothing else remains."""
        storage = JSONFileStorage(tmp_path)
        storage.save("k", "first")
        storage.save("k", "second")
        assert storage.load("k") == "second"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_unicode_round_trip(self, tmp_path):
        storage = JSONFileStorage(tmp_path)
        storage.save("k", "Café ☕")
        assert storage.load("k") == "Café ☕"

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "..", "with space"])
    def test_unsafe_keys_rejected(self, tmp_path, key):
        storage = JSONFileStorage(tmp_path)
        with pytest.raises(StorageError):
            storage.save(key, "x")
        with pytest.raises(StorageError):
            storage.load(key)

    def test_unreadable_path_raises_storage_error(self, tmp_path):
        """A directory where the file should be is an OSError, wrapped."""
        (tmp_path / "k.json").mkdir()
        with pytest.raises(StorageError):
            JSONFileStorage(tmp_path).load("k")


# =============================================================================
# GOOGLE SHEETS
# =============================================================================

class TestGoogleSheetsStorage:
    """Tests against a mocked worksheet."""

    def make_storage(self, rows):
        sheet = MagicMock()
        sheet.get_all_values.return_value = rows
        client = MagicMock()
        client.get_state_sheet.return_value = sheet
        return GoogleSheetsStorage(client), sheet

    def test_load_existing_key(self):
        storage, _ = self.make_storage([
            STATE_COLUMNS,
            ["flow_transactions", "[]", "2026-03-01T00:00:00+00:00"],
            ["flow_budgets", '{"Food": 500}', "2026-03-01T00:00:00+00:00"],
        ])
        assert storage.load("flow_budgets") == '{"Food": 500}'

    def test_load_missing_key(self):
        storage, _ = self.make_storage([STATE_COLUMNS])
        assert storage.load("flow_budgets") is None

    def test_header_row_is_not_a_key(self):
        storage, _ = self.make_storage([STATE_COLUMNS])
        assert storage.load("key") is None

    def test_save_new_key_appends(self):
        storage, sheet = self.make_storage([STATE_COLUMNS])
        storage.save("flow_budgets", "{}")

        sheet.append_row.assert_called_once()
        row = sheet.append_row.call_args.args[0]
        assert row[:2] == ["flow_budgets", "{}"]
        sheet.update.assert_not_called()

    def test_save_existing_key_updates_its_row(self):
        storage, sheet = self.make_storage([
            STATE_COLUMNS,
            ["flow_transactions", "[]", ""],
            ["flow_budgets", "{}", ""],
        ])
        storage.save("flow_budgets", '{"Food": 1}')

        sheet.append_row.assert_not_called()
        kwargs = sheet.update.call_args.kwargs
        assert kwargs["range_name"] == "A3:C3"
        assert kwargs["values"][0][:2] == ["flow_budgets", '{"Food": 1}']

    def test_oversized_value_rejected(self):
        storage, sheet = self.make_storage([STATE_COLUMNS])
        with pytest.raises(StorageError):
            storage.save("flow_transactions", "x" * (MAX_CELL_CHARACTERS + 1))
        sheet.append_row.assert_not_called()


# =============================================================================
# SERIALIZER
# =============================================================================

class TestSerializer:
    """Tests for the stored JSON shapes."""

    def test_record_shape(self):
        tx = sample_transaction()
        record = transaction_to_record(tx)
        assert record["id"] == str(tx.id)
        assert record["amount"] == 4.5
        assert record["type"] == "expense"
        assert record["date"] == "2026-03-01"

    def test_integral_amounts_are_ints(self):
        record = transaction_to_record(sample_transaction(amount=Decimal("1500.00")))
        assert record["amount"] == 1500
        assert isinstance(record["amount"], int)

    def test_round_trip_is_exact(self):
        original = [
            sample_transaction(),
            sample_transaction(amount=Decimal("95.40")),
            sample_transaction(amount=Decimal("0.01")),
            sample_transaction(amount=Decimal("999999999999.99")),
            sample_transaction(amount=Decimal("123456789012.34")),
        ]
        loaded = load_transactions(dump_transactions(original))
        assert loaded == original
        assert [t.amount for t in loaded] == [t.amount for t in original]

    @pytest.mark.parametrize("amount", ["12345678.123456789", "1E-400", "0.001", "1E+30"])
    def test_lossy_amounts_cannot_be_stored(self, amount):
        """Amounts a JSON number would not carry exactly never reach storage."""
        with pytest.raises(ValueError):
            sample_transaction(amount=Decimal(amount))

    def test_numbers_load_as_exact_decimals(self):
        record = transaction_to_record(sample_transaction())
        record["amount"] = 0.1
        loaded = load_transactions(json.dumps([record]))
        assert loaded[0].amount == Decimal("0.1")

    def test_stored_sub_cent_amount_is_skipped(self):
        skipped = []
        record = transaction_to_record(sample_transaction())
        record["amount"] = 0.001
        loaded = load_transactions(json.dumps([record]), on_skip=lambda i, reason: skipped.append(i))
        assert loaded == []
        assert skipped == [0]

    def test_missing_optional_fields(self):
        tx = record_to_transaction({
            "id": str(uuid4()),
            "description": "Gift",
            "amount": 20,
            "type": "income",
            "date": "2026-03-01",
        })
        assert tx.category == "Other"
        assert tx.notes == ""
        assert tx.is_recurring is False

    def test_malformed_record_raises_value_error(self):
        with pytest.raises(ValueError):
            record_to_transaction({"id": "nope", "description": "x"})

    def test_skips_are_reported(self):
        skipped = []
        payload = json.dumps([
            transaction_to_record(sample_transaction()),
            {"id": str(uuid4()), "description": "Bad", "amount": -1,
             "type": "expense", "date": "2026-03-01"},
        ])
        loaded = load_transactions(payload, on_skip=lambda i, reason: skipped.append(i))
        assert len(loaded) == 1
        assert skipped == [1]

    @pytest.mark.parametrize("payload", ["{oops", '{"a": 1}', "42"])
    def test_transactions_payload_must_be_a_list(self, payload):
        with pytest.raises(StorageError):
            load_transactions(payload)

    def test_budgets_round_trip(self):
        budgets = {"Food": Decimal("500"), "Dining": Decimal("150.50")}
        assert load_budgets(dump_budgets(budgets)) == budgets

    def test_bad_budget_entries_skipped(self):
        skipped = []
        loaded = load_budgets(
            json.dumps({
                "Food": 500,
                "Dining": "lots",
                "Shopping": True,
                "Other": -5,
                "Housing": 0.005,
                "Education": 1e15,
            }),
            on_skip=lambda category, reason: skipped.append(category),
        )
        assert loaded == {"Food": Decimal("500")}
        assert skipped == ["Dining", "Shopping", "Other", "Housing", "Education"]

    @pytest.mark.parametrize("payload", ["nope", "[]"])
    def test_budgets_payload_must_be_an_object(self, payload):
        with pytest.raises(StorageError):
            load_budgets(payload)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
