"""
Main Orchestrator for Flow Ledger

This module ties together all the components:
1. Settings → storage backend → audit logger → engine
2. Export (filter → rows → CSV file → audit)

DESIGN DECISION: The engine never reads settings or touches files
itself. Everything environment-specific is decided here and injected.
"""

from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from flow_ledger.audit import AuditLogger
from flow_ledger.config import Settings, get_settings
from flow_ledger.export import write_csv
from flow_ledger.ledger import LedgerEngine
from flow_ledger.models.transaction import SortOrder, TransactionFilter
from flow_ledger.services.storage import (
    InMemoryStorage,
    JSONFileStorage,
    KeyValueStorageInterface,
)


def create_storage(settings: Optional[Settings] = None) -> KeyValueStorageInterface:
    """
    Build the storage backend selected by FLOW_STORAGE_BACKEND.

    Google Sheets support is imported only when selected, so the other
    backends work without credentials.
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        return InMemoryStorage()
    if storage_settings.backend == "google_sheets":
        from flow_ledger.services.storage.google_sheets import (
            GoogleSheetsClient,
            GoogleSheetsStorage,
        )
        return GoogleSheetsStorage(GoogleSheetsClient(settings.google_sheets))
    return JSONFileStorage(storage_settings.data_path)


def create_ledger(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> LedgerEngine:
    """
    Factory function to create a ready-to-use engine.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        storage: Storage to use instead of the configured backend
                (tests pass an InMemoryStorage here).
        audit_logger: Audit logger to share with other components.

    Returns:
        An engine with its state already loaded (or seeded)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    return LedgerEngine(
        storage=storage or create_storage(settings),
        audit_logger=audit_logger or AuditLogger(history_size=app_settings.audit_history_size),
        transactions_key=storage_settings.transactions_key,
        budgets_key=storage_settings.budgets_key,
        currency=app_settings.currency,
        seed_defaults=app_settings.seed_defaults,
    )


def export_transactions(
    engine: LedgerEngine,
    directory: Optional[Union[str, Path]] = None,
    criteria: Optional[Union[TransactionFilter, Mapping[str, Any]]] = None,
    sort: Union[SortOrder, str] = SortOrder.DATE_DESC,
    audit_logger: Optional[AuditLogger] = None,
    on: Optional[date] = None,
) -> Path:
    """
    Export the transactions currently in view to a dated CSV file.

    Args:
        engine: Ledger to export from
        directory: Target directory, defaults to the configured export_dir
        criteria: Same filters as LedgerEngine.query
        sort: Same orderings as LedgerEngine.query
        audit_logger: Where to record the export, defaults to the engine's
        on: Date stamped into the filename, defaults to today

    Returns:
        Path of the written file
    """
    if directory is None:
        directory = get_settings().app.export_dir

    transactions = engine.query(criteria, sort)
    rows = engine.export_rows(transactions)
    path = write_csv(rows, directory, on=on)

    audit_logger = audit_logger or engine.audit_logger
    audit_logger.log_export_generated(str(path), len(rows))

    return path
