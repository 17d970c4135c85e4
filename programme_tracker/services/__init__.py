"""Services package."""

from programme_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    QuotaExceededError,
    StorageError,
    StoreAdapter,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "QuotaExceededError",
    "StorageError",
    "StoreAdapter",
]
