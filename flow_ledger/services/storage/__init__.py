"""
Storage Services Package

Provides the key-value interface the ledger persists through, plus
in-memory, JSON-file and Google Sheets implementations.
"""

from flow_ledger.services.storage.interface import (
    ConnectionError,
    KeyValueStorageInterface,
    StorageError,
)
from flow_ledger.services.storage.json_file import JSONFileStorage
from flow_ledger.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JSONFileStorage",
]
