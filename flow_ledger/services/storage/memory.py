"""In-memory storage, for tests and throwaway sessions."""

from typing import Optional

from flow_ledger.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Dict-backed storage. Everything is lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value
        self.save_count += 1

    def keys(self) -> list[str]:
        return list(self._data)
