"""
Local JSON File Storage

DESIGN DECISION: Each key is one JSON file in a data directory because:
1. Users can open and back up their ledger with any text editor
2. No database setup required
3. One document per key maps directly onto the key-value contract

Writes go to a temporary file in the same directory first and are then
moved into place with os.replace, so a crash mid-write leaves the
previous document intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fundledger.services.storage.interface import StateStorageInterface, StorageError


class JsonFileStorage(StateStorageInterface):
    """
    Stores each key as `<data_dir>/<key>.json`.

    The data directory is created on construction.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir).expanduser()
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot prepare data directory {self._data_dir}: {e}")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        if not key or os.sep in key or (os.altsep and os.altsep in key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        """Read the document for a key, None if it was never written."""
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def write(self, key: str, document: str) -> None:
        """Atomically replace the document for a key."""
        self._write_atomic(self.path_for(key), document)

    @retry(
        retry=retry_if_exception_type(StorageError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, document: str) -> None:
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{path.stem}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
