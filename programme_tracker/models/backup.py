"""
Backup Document Model

The JSON backup holds every persisted slot plus an export timestamp and
a format version. Importing a backup written by this model reproduces
the exported records exactly.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    UserSettings,
    utc_now,
)


BACKUP_VERSION = "1.0"


class BackupDocument(BaseModel):
    """Full snapshot of the tracker's persisted state."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    exported_at: datetime = Field(default_factory=utc_now)
    version: str = BACKUP_VERSION

    participants: list[Participant] = Field(default_factory=list)
    budget_items: list[BudgetItem] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    settings: UserSettings = Field(default_factory=UserSettings)

    def to_json(self) -> str:
        """Backup file contents, indented two spaces."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "participants": len(self.participants),
            "budgetItems": len(self.budget_items),
            "expenses": len(self.expenses),
        }
