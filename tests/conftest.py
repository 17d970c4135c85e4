"""
Shared fixtures for the Programme Tracker test-suite.

Every fixture runs against an InMemoryStore, so no test touches the
real data directory.
"""

import pytest

from programme_tracker.events import ChangeNotifier
from programme_tracker.operations import MutationService
from programme_tracker.repositories import RepositorySet
from programme_tracker.services.storage import (
    InMemoryStore,
    StorageError,
    StoreAdapter,
)


class FlakyStore(InMemoryStore):
    """In-memory store whose writes fail for selected slots."""

    def __init__(self, failing_keys=()):
        super().__init__()
        self.failing_keys = set(failing_keys)

    def set_item(self, key: str, value: str) -> None:
        if key in self.failing_keys:
            raise StorageError(f"Simulated write failure for '{key}'")
        super().set_item(key, value)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def flaky_store():
    return FlakyStore()


@pytest.fixture
def adapter(store):
    return StoreAdapter(store)


@pytest.fixture
def repositories(adapter):
    return RepositorySet(adapter)


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def events(notifier):
    """List that collects every event the notifier announces."""
    received = []
    notifier.subscribe(received.append)
    return received


@pytest.fixture
def service(repositories, notifier):
    return MutationService(repositories, notifier)


@pytest.fixture
def participant_fields():
    """Factory for valid "add participant" form input."""
    def build(**overrides):
        fields = {
            "name": "Thandi Mokoena",
            "email": "thandi@example.com",
            "phone": "082 555 0101",
            "programme": "entrepreneurship",
            "startDate": "2026-02-01",
            "notes": "",
        }
        fields.update(overrides)
        return fields
    return build
