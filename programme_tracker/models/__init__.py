"""
Data Models Package

This package contains all Pydantic models used in the Programme Tracker.
Everything read from or written to the store conforms to these schemas.
"""

from programme_tracker.models.records import (
    BudgetItem,
    BudgetPriority,
    MAX_TEXT_LENGTH,
    Expense,
    Participant,
    ParticipantStatus,
    Programme,
    PROGRAMME_DISPLAY_NAMES,
    Theme,
    TrackerRecord,
    UserSettings,
    format_programme_name,
    utc_now,
)
from programme_tracker.models.forms import (
    BudgetItemForm,
    ExpenseForm,
    ParticipantForm,
)
from programme_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from programme_tracker.models.stats import (
    NOT_AVAILABLE,
    BudgetUtilization,
    DashboardStats,
    ForecastSummary,
    PerformanceClass,
    RoiSummary,
)
from programme_tracker.models.events import (
    ChangeEvent,
    ChangeEventBuilder,
    ChangeEventType,
    ChangeTopic,
    EventSeverity,
    Notification,
    NotificationLevel,
)
from programme_tracker.models.backup import BACKUP_VERSION, BackupDocument

__all__ = [
    # Records
    "BudgetItem",
    "BudgetPriority",
    "MAX_TEXT_LENGTH",
    "Expense",
    "Participant",
    "ParticipantStatus",
    "Programme",
    "PROGRAMME_DISPLAY_NAMES",
    "Theme",
    "TrackerRecord",
    "UserSettings",
    "format_programme_name",
    "utc_now",
    # Forms
    "BudgetItemForm",
    "ExpenseForm",
    "ParticipantForm",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Statistics
    "NOT_AVAILABLE",
    "BudgetUtilization",
    "DashboardStats",
    "ForecastSummary",
    "PerformanceClass",
    "RoiSummary",
    # Events
    "ChangeEvent",
    "ChangeEventBuilder",
    "ChangeEventType",
    "ChangeTopic",
    "EventSeverity",
    "Notification",
    "NotificationLevel",
    # Backup
    "BACKUP_VERSION",
    "BackupDocument",
]
