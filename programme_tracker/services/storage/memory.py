"""
In-Memory Key-Value Store

Holds slots in a dict. Used by the test-suite and for throwaway sessions
(PROGRAMME_STORAGE_BACKEND=memory). An optional quota mimics the size
limit of browser-style storage so write failures can be exercised.
"""

from typing import Optional

from programme_tracker.services.storage.interface import (
    KeyValueStore,
    QuotaExceededError,
)


class InMemoryStore(KeyValueStore):
    """Dict-backed store with an optional total size limit."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for k, v in self._data.items():
            if k != key:
                total += len(k.encode("utf-8")) + len(v.encode("utf-8"))
        return total + len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            needed = self._size_with(key, value)
            if needed > self._quota_bytes:
                raise QuotaExceededError(
                    f"Writing '{key}' needs {needed} bytes, quota is {self._quota_bytes}"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return sorted(self._data)
