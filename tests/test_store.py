"""
Tests for the key-value stores and the StoreAdapter.

The adapter must never raise: every failure becomes the caller's
default (reads) or False (writes), and a failed write leaves the
previous value in place.
"""

import json

import pytest
from pydantic import TypeAdapter

from programme_tracker.models import BudgetItem, Participant
from programme_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    QuotaExceededError,
    StorageError,
    StoreAdapter,
)


class BrokenStore(InMemoryStore):
    """Store whose every operation raises."""

    def get_item(self, key):
        raise OSError("disk unavailable")

    def set_item(self, key, value):
        raise OSError("disk unavailable")

    def remove_item(self, key):
        raise OSError("disk unavailable")

    def clear(self):
        raise OSError("disk unavailable")


class TestInMemoryStore:
    """Tests for the dict-backed store."""

    def test_set_get_remove(self):
        """Test the basic slot lifecycle."""
        store = InMemoryStore()
        assert store.get_item("participants") is None
        store.set_item("participants", "[]")
        assert store.get_item("participants") == "[]"
        assert store.keys() == ["participants"]
        store.remove_item("participants")
        assert store.get_item("participants") is None

    def test_remove_missing_key_is_not_an_error(self):
        """Test removing a key that was never written."""
        InMemoryStore().remove_item("nothing")

    def test_quota_exceeded_keeps_previous_value(self):
        """Test a write over quota raises and leaves the old value."""
        store = InMemoryStore(quota_bytes=40)
        store.set_item("expenses", "[]")
        with pytest.raises(QuotaExceededError):
            store.set_item("expenses", "x" * 100)
        assert store.get_item("expenses") == "[]"


class TestJsonFileStore:
    """Tests for the directory-of-files store."""

    def test_slot_is_a_json_file(self, tmp_path):
        """Test each slot is written as <key>.json."""
        store = JsonFileStore(tmp_path / "data")
        store.set_item("budgetItems", '[{"category": "Training"}]')
        path = tmp_path / "data" / "budgetItems.json"
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))[0]["category"] == "Training"
        assert store.get_item("budgetItems") == '[{"category": "Training"}]'

    def test_missing_directory_reads_as_empty(self, tmp_path):
        """Test a store over a directory that does not exist yet."""
        store = JsonFileStore(tmp_path / "absent")
        assert store.get_item("participants") is None
        assert store.keys() == []

    def test_keys_and_clear(self, tmp_path):
        """Test keys are listed sorted and clear removes every slot."""
        store = JsonFileStore(tmp_path)
        store.set_item("settings", "{}")
        store.set_item("expenses", "[]")
        assert store.keys() == ["expenses", "settings"]
        store.clear()
        assert store.keys() == []

    def test_rejects_unsafe_key(self, tmp_path):
        """Test slot names cannot escape the data directory."""
        store = JsonFileStore(tmp_path)
        with pytest.raises(StorageError):
            store.set_item("../outside", "[]")

    def test_quota_exceeded_keeps_previous_file(self, tmp_path):
        """Test a write over quota leaves the old file untouched."""
        store = JsonFileStore(tmp_path, quota_bytes=10)
        store.set_item("expenses", "[]")
        with pytest.raises(QuotaExceededError):
            store.set_item("expenses", "x" * 50)
        assert store.get_item("expenses") == "[]"
        assert not list(tmp_path.glob("*.tmp"))


class TestStoreAdapter:
    """Tests for StoreAdapter get/set semantics."""

    def test_missing_slot_returns_default(self):
        """Test a never-written slot yields the default."""
        adapter = StoreAdapter(InMemoryStore())
        assert adapter.get("participants", []) == []

    def test_plain_json_round_trip(self):
        """Test values without a TypeAdapter are stored as plain JSON."""
        store = InMemoryStore()
        adapter = StoreAdapter(store)
        assert adapter.set("numbers", [1, 2, 3]) is True
        assert store.get_item("numbers") == "[1, 2, 3]"
        assert adapter.get("numbers", []) == [1, 2, 3]

    def test_corrupt_data_returns_default(self):
        """Test unparseable text yields the default instead of raising."""
        store = InMemoryStore()
        store.set_item("participants", "{not json")
        adapter = StoreAdapter(store)
        assert adapter.get("participants", []) == []

    def test_invalid_records_return_default(self):
        """Test records that fail validation yield the default."""
        store = InMemoryStore()
        store.set_item("participants", '[{"id": "P001"}]')
        adapter = StoreAdapter(store)
        codec = TypeAdapter(list[Participant])
        assert adapter.get("participants", [], codec) == []

    def test_get_records_keeps_valid_records(self):
        """Test one invalid record is skipped and the rest are still returned."""
        store = InMemoryStore()
        store.set_item("budgetItems", json.dumps([
            {"category": "Training", "amount": 1000, "priority": "High"},
            {"category": "Venue", "amount": None, "priority": "Low"},
        ]))
        adapter = StoreAdapter(store)
        records, complete = adapter.get_records("budgetItems", TypeAdapter(BudgetItem))
        assert [r.category for r in records] == ["Training"]
        assert complete is False

    def test_get_records_missing_slot_is_complete(self):
        """Test a never-written slot is an empty but complete collection."""
        adapter = StoreAdapter(InMemoryStore())
        assert adapter.get_records("expenses", TypeAdapter(BudgetItem)) == ([], True)

    def test_get_records_corrupt_or_wrong_shape(self):
        """Test unparseable text and a non-list value are both incomplete."""
        store = InMemoryStore()
        store.set_item("budgetItems", "{not json")
        store.set_item("expenses", '{"category": "Training"}')
        adapter = StoreAdapter(store)
        codec = TypeAdapter(BudgetItem)
        assert adapter.get_records("budgetItems", codec) == ([], False)
        assert adapter.get_records("expenses", codec) == ([], False)

    def test_get_records_read_failure(self):
        """Test an exception from the store is incomplete, not raised."""
        adapter = StoreAdapter(BrokenStore())
        assert adapter.get_records("participants", TypeAdapter(Participant)) == ([], False)

    def test_read_failure_returns_default(self):
        """Test an exception from the store yields the default."""
        adapter = StoreAdapter(BrokenStore())
        assert adapter.get("settings", {"theme": "light"}) == {"theme": "light"}

    def test_write_failure_returns_false(self):
        """Test an exception from the store becomes False."""
        adapter = StoreAdapter(BrokenStore())
        assert adapter.set("settings", {"theme": "dark"}) is False
        assert adapter.remove("settings") is False
        assert adapter.clear() is False

    def test_quota_failure_keeps_prior_value(self):
        """Test a write over quota returns False and the old value stays readable."""
        adapter = StoreAdapter(InMemoryStore(quota_bytes=64))
        assert adapter.set("expenses", [1]) is True
        assert adapter.set("expenses", list(range(100))) is False
        assert adapter.get("expenses", []) == [1]

    def test_unencodable_value_returns_false(self):
        """Test a value JSON cannot encode is reported, not raised."""
        adapter = StoreAdapter(InMemoryStore())
        assert adapter.set("bad", {1, 2}) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
