"""
Abstract Storage Interface

DESIGN DECISION: The engine persists through a tiny key-value contract.
This allows us to:
1. Keep the browser-style "one document per key" model
2. Use in-memory storage for testing
3. Swap a local JSON directory for Google Sheets without touching the engine

The interface is intentionally simple - two documents (transactions and
budgets) stored as text under two keys.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation (memory, files, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Load the document stored under a key.

        Args:
            key: Storage key

        Returns:
            The serialized document, or None if nothing was ever saved

        Raises:
            StorageError: If the backend could not be read
        """
        pass

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """
        Replace the document stored under a key.

        Args:
            key: Storage key
            value: Serialized document

        Raises:
            StorageError: If the write failed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
