"""
JSON File Key-Value Store

Each slot is one file, <data_dir>/<key>.json, holding the slot's text.

TRADEOFFS:
- One file per slot means a multi-slot save is several independent writes
  (no transaction across slots)
- Each single write is atomic: text goes to a temp file that is then
  renamed over the old one, so a failed write leaves the old value intact
- Nothing guards against two processes writing the same directory
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from programme_tracker.services.storage.interface import (
    KeyValueStore,
    QuotaExceededError,
    StorageError,
)


SLOT_SUFFIX = ".json"
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFileStore(KeyValueStore):
    """Store backed by a directory of JSON files."""

    def __init__(self, data_dir: Path | str, quota_bytes: Optional[int] = None):
        self._data_dir = Path(data_dir)
        self._quota_bytes = quota_bytes

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid slot name: {key!r}")
        return self._data_dir / f"{key}{SLOT_SUFFIX}"

    def _check_quota(self, key: str, value: str) -> None:
        if self._quota_bytes is None:
            return
        target = self._path_for(key)
        used = 0
        if self._data_dir.exists():
            for path in self._data_dir.glob(f"*{SLOT_SUFFIX}"):
                if path != target:
                    used += path.stat().st_size
        needed = used + len(value.encode("utf-8"))
        if needed > self._quota_bytes:
            raise QuotaExceededError(
                f"Writing '{key}' needs {needed} bytes, quota is {self._quota_bytes}"
            )

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self._check_quota(key, value)
        self._data_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._data_dir,
            prefix=f".{key}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write slot '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def clear(self) -> None:
        if not self._data_dir.exists():
            return
        for path in self._data_dir.glob(f"*{SLOT_SUFFIX}"):
            path.unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self._data_dir.exists():
            return []
        return sorted(
            path.name[: -len(SLOT_SUFFIX)]
            for path in self._data_dir.glob(f"*{SLOT_SUFFIX}")
            if _KEY_PATTERN.match(path.name[: -len(SLOT_SUFFIX)])
        )
