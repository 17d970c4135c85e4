"""Repositories package."""

from programme_tracker.repositories.collections import (
    BudgetItemRepository,
    CollectionRepository,
    ExpenseRepository,
    IdentifiedRepository,
    ParticipantRepository,
    RepositorySet,
    SettingsRepository,
    next_sequential_id,
)

__all__ = [
    "BudgetItemRepository",
    "CollectionRepository",
    "ExpenseRepository",
    "IdentifiedRepository",
    "ParticipantRepository",
    "RepositorySet",
    "SettingsRepository",
    "next_sequential_id",
]
