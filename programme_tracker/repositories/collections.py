"""
Entity Repositories

Each repository owns exactly one persisted slot and is the single
in-memory copy of that collection. There is no second cache anywhere
else in the process.

- reload() re-reads the slot and replaces the in-memory collection
- persist() writes the in-memory collection back in one adapter write
- save_all() replaces the in-memory collection, then persists it

A slot holding records that fail to load is read as far as possible and
then locked against writes until it is overwritten as a whole (backup
import) or cleared.

Callers receive copies of the record list; mutating them does nothing
until they are handed back through save_all().
"""

import structlog
from pydantic import TypeAdapter

from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    Theme,
    TrackerRecord,
    UserSettings,
)
from programme_tracker.services.storage import StoreAdapter


ID_WIDTH = 3


def next_sequential_id(existing_ids: list[str], prefix: str) -> str:
    """
    Next id for a prefix: highest numeric suffix plus one, zero-padded.

    Ids with another prefix are ignored; ids with the right prefix but a
    non-numeric suffix count as 0.
    """
    highest = 0
    for record_id in existing_ids:
        if not record_id.startswith(prefix):
            continue
        suffix = record_id[len(prefix):]
        number = int(suffix) if suffix.isascii() and suffix.isdigit() else 0
        highest = max(highest, number)
    return f"{prefix}{highest + 1:0{ID_WIDTH}d}"


class CollectionRepository:
    """
    Base repository for an ordered list of records in one slot.

    Subclasses set storage_key and record_type.
    """

    storage_key: str = ""
    record_type: type[TrackerRecord] = TrackerRecord

    def __init__(self, adapter: StoreAdapter):
        self._adapter = adapter
        self._codec = TypeAdapter(list[self.record_type])
        self._item_codec = TypeAdapter(self.record_type)
        self._items: list = []
        self._readable = True
        self._logger = structlog.get_logger()
        self.reload()

    def reload(self) -> list:
        """
        Re-read the slot, replacing the in-memory collection.

        Records that cannot be read are left out. When that happens the
        repository is marked unreadable and will not write the slot back.
        """
        records, complete = self._adapter.get_records(
            self.storage_key, self._item_codec
        )
        self._items = records
        self._readable = complete
        if not complete:
            self._logger.warning(
                "collection_partially_loaded",
                key=self.storage_key,
                loaded=len(records),
            )
        return list(self._items)

    def load_all(self) -> list:
        """Fresh copy of the collection, always read from the store."""
        return self.reload()

    @property
    def items(self) -> list:
        """Current in-memory collection, without touching the store."""
        return list(self._items)

    @property
    def readable(self) -> bool:
        """False when the last reload could not read everything in the slot."""
        return self._readable

    def replace(self, records: list) -> None:
        """Swap the in-memory collection without writing it."""
        self._items = list(records)

    def overwrite(self, records: list) -> None:
        """
        Swap the in-memory collection for one that supersedes the slot.

        Unlike replace(), this lifts the write refusal on an unreadable
        slot, so it is only for whole-collection replacements.
        """
        self.replace(records)
        self._readable = True

    def persist(self) -> bool:
        """
        Write the in-memory collection to the store.

        Refused (returns False) while the slot is unreadable, so records
        that failed to load are never overwritten.
        """
        if not self._readable:
            self._logger.error(
                "persist_refused",
                key=self.storage_key,
                reason="slot_unreadable",
            )
            return False
        ok = self._adapter.set(self.storage_key, self._items, self._codec)
        if ok:
            self._logger.debug(
                "collection_persisted",
                key=self.storage_key,
                count=len(self._items),
            )
        return ok

    def save_all(self, records: list) -> bool:
        """Replace the whole collection and persist it in one write."""
        self.overwrite(records)
        return self.persist()

    def reset(self) -> None:
        """Forget every record in memory (the slot is not touched)."""
        self._items = []
        self._readable = True

    def __len__(self) -> int:
        return len(self._items)


class IdentifiedRepository(CollectionRepository):
    """Repository whose records carry prefixed sequential ids."""

    id_prefix: str = ""

    def next_id(self) -> str:
        """Id the next created record should get."""
        return next_sequential_id(
            [record.id for record in self._items], self.id_prefix
        )

    def index_of(self, record_id: str) -> int:
        """Position of a record, or -1 when absent."""
        for index, record in enumerate(self._items):
            if record.id == record_id:
                return index
        return -1


class ParticipantRepository(IdentifiedRepository):
    storage_key = "participants"
    record_type = Participant
    id_prefix = "P"


class BudgetItemRepository(CollectionRepository):
    storage_key = "budgetItems"
    record_type = BudgetItem


class ExpenseRepository(IdentifiedRepository):
    storage_key = "expenses"
    record_type = Expense
    id_prefix = "EXP"


class SettingsRepository:
    """Owner of the single settings record."""

    storage_key = "settings"

    def __init__(self, adapter: StoreAdapter, default_theme: Theme = Theme.LIGHT):
        self._adapter = adapter
        self._codec = TypeAdapter(UserSettings)
        self._default_theme = Theme(default_theme)
        self._current = self._default()
        self.reload()

    def _default(self) -> UserSettings:
        return UserSettings(theme=self._default_theme)

    def reload(self) -> UserSettings:
        self._current = self._adapter.get(self.storage_key, self._default(), self._codec)
        return self._current.model_copy()

    @property
    def current(self) -> UserSettings:
        return self._current.model_copy()

    def replace(self, settings: UserSettings) -> None:
        self._current = settings.model_copy()

    def persist(self) -> bool:
        return self._adapter.set(self.storage_key, self._current, self._codec)

    def save(self, settings: UserSettings) -> bool:
        self.replace(settings)
        return self.persist()

    def reset(self) -> None:
        self._current = self._default()


class RepositorySet:
    """
    The four repositories that make up the tracker's persisted state.

    persist_all() is best-effort and NOT atomic: each slot is written
    independently, so an interruption can leave some slots newer than
    others. The result says which writes succeeded.
    """

    def __init__(self, adapter: StoreAdapter, default_theme: Theme = Theme.LIGHT):
        self.adapter = adapter
        self.participants = ParticipantRepository(adapter)
        self.budget_items = BudgetItemRepository(adapter)
        self.expenses = ExpenseRepository(adapter)
        self.settings = SettingsRepository(adapter, default_theme)
        self._logger = structlog.get_logger()

    def _all(self) -> list:
        return [self.participants, self.budget_items, self.expenses, self.settings]

    def reload_all(self) -> None:
        for repository in self._all():
            repository.reload()

    def persist_all(self) -> dict[str, bool]:
        """Write every slot; returns {slot: written} for each one."""
        results = {repo.storage_key: repo.persist() for repo in self._all()}
        if not all(results.values()):
            self._logger.warning(
                "persist_all_incomplete",
                failed=[key for key, ok in results.items() if not ok],
            )
        return results

    def clear_all(self) -> bool:
        """Remove every slot and reset all repositories to defaults."""
        ok = True
        for repository in self._all():
            ok = self.adapter.remove(repository.storage_key) and ok
            repository.reset()
        return ok
