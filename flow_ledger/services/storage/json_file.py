"""
JSON File Storage Implementation

One file per key (`<data_dir>/<key>.json`). This is the local equivalent
of the browser's local storage: simple, inspectable, no setup.

Writes are atomic: content goes to a temporary file in the same directory
which then replaces the target with os.replace, so a crash mid-write
never leaves a half-written ledger behind.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from flow_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


SAFE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JSONFileStorage(KeyValueStorageInterface):
    """
    Stores each key as a UTF-8 JSON file in a directory.

    The directory is created on first write.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path for a key. Keys must be plain file-name safe strings."""
        if not SAFE_KEY_PATTERN.match(key) or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file must live in the same directory for os.replace to be atomic
        fd, temp_name = tempfile.mkstemp(
            prefix=f"{path.name}-",
            suffix=".tmp",
            dir=path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise

    def load(self, key: str) -> Optional[str]:
        """Read a key's file, or None if it does not exist yet."""
        path = self.path_for(key)
        try:
            return self._read(path)
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, value: str) -> None:
        """Atomically replace a key's file."""
        path = self.path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
