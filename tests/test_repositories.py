"""
Tests for entity repositories and id generation.
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from programme_tracker.models import BudgetItem, Participant, Theme, UserSettings
from programme_tracker.repositories import (
    BudgetItemRepository,
    ParticipantRepository,
    RepositorySet,
    SettingsRepository,
    next_sequential_id,
)
from programme_tracker.services.storage import StoreAdapter


def participant(participant_id: str, email: str = None) -> Participant:
    return Participant(
        id=participant_id,
        name=f"Participant {participant_id}",
        email=email or f"{participant_id.lower()}@example.com",
        programme="skills",
        start_date=date(2026, 1, 15),
    )


class TestNextSequentialId:
    """Tests for prefixed sequential ids."""

    def test_empty_collection(self):
        """Test the first id of an empty collection."""
        assert next_sequential_id([], "P") == "P001"

    def test_uses_highest_suffix(self):
        """Test gaps are not reused: after P001 and P005 comes P006."""
        assert next_sequential_id(["P001", "P005"], "P") == "P006"

    def test_order_does_not_matter(self):
        """Test the highest suffix wins regardless of position."""
        assert next_sequential_id(["P010", "P002"], "P") == "P011"

    def test_other_prefixes_are_ignored(self):
        """Test ids with a different prefix do not count."""
        assert next_sequential_id(["EXP007", "P002"], "P") == "P003"

    def test_non_numeric_suffix_counts_as_zero(self):
        """Test malformed ids do not break generation."""
        assert next_sequential_id(["Pabc"], "P") == "P001"

    def test_grows_past_padding(self):
        """Test ids keep counting past three digits."""
        assert next_sequential_id(["EXP999"], "EXP") == "EXP1000"


class TestCollectionRepository:
    """Tests for load/save behaviour of record collections."""

    def test_empty_store_gives_empty_collections(self, repositories):
        """Test a fresh store loads as empty collections and default settings."""
        assert repositories.participants.load_all() == []
        assert repositories.budget_items.load_all() == []
        assert repositories.expenses.load_all() == []
        assert repositories.settings.current == UserSettings()

    def test_save_all_then_load_all(self, repositories, store):
        """Test a saved collection is what the next load returns."""
        records = [participant("P001"), participant("P002")]
        assert repositories.participants.save_all(records) is True
        assert store.get_item("participants") is not None

        fresh = ParticipantRepository(StoreAdapter(store))
        assert fresh.load_all() == records

    def test_returned_lists_are_copies(self, repositories):
        """Test mutating a returned list does not touch the repository."""
        repositories.participants.save_all([participant("P001")])
        loaded = repositories.participants.load_all()
        loaded.clear()
        assert len(repositories.participants) == 1

    def test_corrupt_slot_loads_as_empty(self, store, adapter):
        """Test a corrupt slot falls back to an empty collection."""
        store.set_item("participants", "not json at all")
        repository = ParticipantRepository(adapter)
        assert repository.load_all() == []
        assert repository.readable is False

    def test_partly_invalid_slot_keeps_good_records(self, store, adapter):
        """Test one bad record does not hide the others."""
        store.set_item("budgetItems", json.dumps([
            {"category": "Training", "amount": 1000, "priority": "High"},
            {"category": "Venue", "amount": None, "priority": "Low"},
        ]))
        repository = BudgetItemRepository(adapter)
        assert [item.category for item in repository.items] == ["Training"]
        assert repository.readable is False

    def test_unreadable_slot_is_not_persisted(self, store, adapter):
        """Test persist refuses to write over records that failed to load."""
        original = '[{"category": "Venue", "amount": null, "priority": "Low"}]'
        store.set_item("budgetItems", original)
        repository = BudgetItemRepository(adapter)
        repository.replace([
            BudgetItem(category="Food", amount=Decimal("10"), priority="Low"),
        ])
        assert repository.persist() is False
        assert store.get_item("budgetItems") == original

    def test_save_all_supersedes_unreadable_slot(self, store, adapter):
        """Test a whole-collection save may replace an unreadable slot."""
        store.set_item("participants", "not json at all")
        repository = ParticipantRepository(adapter)
        assert repository.save_all([participant("P001")]) is True
        assert repository.readable is True
        assert [p.id for p in repository.load_all()] == ["P001"]

    def test_reset_makes_slot_writable(self, store, adapter):
        """Test clearing a repository lifts the write refusal."""
        store.set_item("participants", "not json at all")
        repository = ParticipantRepository(adapter)
        repository.reset()
        assert repository.readable is True
        assert repository.persist() is True
        assert store.get_item("participants") == "[]"

    def test_next_id_reads_current_collection(self, repositories):
        """Test next_id follows the records held in memory."""
        assert repositories.participants.next_id() == "P001"
        repositories.participants.save_all([participant("P001"), participant("P005")])
        assert repositories.participants.next_id() == "P006"
        assert repositories.expenses.next_id() == "EXP001"

    def test_index_of(self, repositories):
        """Test positions are looked up by id."""
        repositories.participants.save_all([participant("P001"), participant("P002")])
        assert repositories.participants.index_of("P002") == 1
        assert repositories.participants.index_of("P404") == -1


class TestSettingsRepository:
    """Tests for the single settings record."""

    def test_default_theme_is_configurable(self, adapter):
        """Test the theme used when nothing is stored yet."""
        repository = SettingsRepository(adapter, Theme.DARK)
        assert repository.current.theme == Theme.DARK

    def test_save_and_reload(self, adapter, store):
        """Test the settings record persists."""
        repository = SettingsRepository(adapter)
        assert repository.save(UserSettings(theme=Theme.DARK)) is True
        assert store.get_item("settings") == '{"theme":"dark"}'
        assert SettingsRepository(adapter).current.theme == Theme.DARK


class TestRepositorySet:
    """Tests for operations spanning every slot."""

    def test_persist_all_reports_each_slot(self, flaky_store):
        """Test persist_all says which slots were written."""
        flaky_store.failing_keys = {"expenses"}
        repositories = RepositorySet(StoreAdapter(flaky_store))
        results = repositories.persist_all()
        assert results == {
            "participants": True,
            "budgetItems": True,
            "expenses": False,
            "settings": True,
        }

    def test_clear_all(self, repositories, store):
        """Test clear_all removes every slot and empties memory."""
        repositories.participants.save_all([participant("P001")])
        repositories.settings.save(UserSettings(theme=Theme.DARK))
        assert repositories.clear_all() is True
        assert store.keys() == []
        assert len(repositories.participants) == 0
        assert repositories.settings.current.theme == Theme.LIGHT

    def test_reload_all_picks_up_external_writes(self, repositories, store, adapter):
        """Test reload_all re-reads every slot."""
        other = RepositorySet(adapter)
        other.participants.save_all([participant("P001")])
        assert len(repositories.participants) == 0
        repositories.reload_all()
        assert len(repositories.participants) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
