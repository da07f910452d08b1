"""
JSON File Storage Implementation

DESIGN DECISION: Each key is stored as its own JSON file in a data
directory. This mirrors a browser's localStorage (one serialized string
per key) and keeps the files readable by hand.

TRADEOFFS:
- Whole-array rewrites on every save (fine for personal-scale data)
- No cross-process locking (single user, single process)

Writes go through a temp file and `os.replace`, so a crash mid-write
leaves the previous value intact.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from budget_tracker.config import get_settings
from budget_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageError,
)

logger = structlog.get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-per-key JSON store.

    Transient OS errors on write (e.g. a file briefly locked by a backup
    tool) are retried before giving up with StorageError.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self._data_dir = Path(data_dir or get_settings().storage.data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path for a key. Characters unsafe in file names become '_'."""
        if not key:
            raise StorageError("Storage key must not be empty")
        return self._data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return default
        except OSError as e:
            raise StorageError(f"Failed to read '{key}': {e}")

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptDataError(f"Stored value for '{key}' is not valid JSON: {e}")

    def save(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            payload = json.dumps(value, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}")

        try:
            self._write(path, payload)
        except OSError as e:
            logger.error("storage_write_failed", key=key, path=str(path), error=str(e))
            raise StorageError(f"Failed to save '{key}': {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
