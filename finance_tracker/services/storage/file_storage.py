"""
JSON File Storage

Each key is stored as one file, <data_dir>/<key>.json.

Writes go to a temporary file in the same directory which then replaces
the target with os.replace(). The rename is atomic on POSIX and Windows,
so a crash mid-write leaves the previous document intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.services.storage.interface import StorageAdapter, StorageError


class JsonFileStorage(StorageAdapter):
    """File-per-key storage in a local directory."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File a key is stored in."""
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            # Undecodable bytes become U+FFFD; the document parser rejects them
            return path.read_bytes().decode("utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def store(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            # Leave no partial temp file behind
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
