"""Services package."""

from flow_ledger.services.serializer import (
    dump_budgets,
    dump_transactions,
    load_budgets,
    load_transactions,
)
from flow_ledger.services.storage import (
    ConnectionError,
    InMemoryStorage,
    JSONFileStorage,
    KeyValueStorageInterface,
    StorageError,
)

__all__ = [
    # Serialization
    "dump_budgets",
    "dump_transactions",
    "load_budgets",
    "load_transactions",
    # Storage services
    "ConnectionError",
    "InMemoryStorage",
    "JSONFileStorage",
    "KeyValueStorageInterface",
    "StorageError",
]
