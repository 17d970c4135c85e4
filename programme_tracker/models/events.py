"""
Change Event Models

Every successful mutation produces a ChangeEvent. Events are logged and
handed to the listeners registered with the change notifier, which is how
views learn that they need to redraw.

DESIGN DECISION: Views subscribe to topics, not to event types.
A topic names a piece of the UI that may need refreshing; the event
decides which topics it touches.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from programme_tracker.models.records import utc_now


class ChangeTopic(str, Enum):
    """
    Refresh targets a listener can subscribe to.

    Each topic corresponds to one view refresher: the participant list,
    the finance tables, the dashboard counters, programme progress, the
    performance grid and the analytics page.
    """
    PARTICIPANTS = "participants"
    FINANCIAL = "financial"
    DASHBOARD = "dashboard"
    PROGRESS = "progress"
    PERFORMANCE = "performance"
    ANALYTICS = "analytics"


PARTICIPANT_TOPICS = [
    ChangeTopic.PARTICIPANTS,
    ChangeTopic.DASHBOARD,
    ChangeTopic.PROGRESS,
    ChangeTopic.PERFORMANCE,
    ChangeTopic.ANALYTICS,
]
FINANCIAL_TOPICS = [
    ChangeTopic.FINANCIAL,
    ChangeTopic.ANALYTICS,
]


class ChangeEventType(str, Enum):
    """Types of changes the tracker announces."""
    # Participants
    PARTICIPANT_CREATED = "participant_created"
    PARTICIPANT_REMOVED = "participant_removed"
    PARTICIPANT_COMPLETED = "participant_completed"

    # Finance
    BUDGET_ITEM_CREATED = "budget_item_created"
    BUDGET_ITEM_REMOVED = "budget_item_removed"
    EXPENSE_CREATED = "expense_created"

    # Settings and bulk operations
    THEME_CHANGED = "theme_changed"
    DATA_CLEARED = "data_cleared"
    DATA_IMPORTED = "data_imported"
    REFRESH_REQUESTED = "refresh_requested"


class EventSeverity(str, Enum):
    """Severity level for change events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ChangeEvent(BaseModel):
    """A single change announcement."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the change was made (UTC)"
    )

    event_type: ChangeEventType
    severity: EventSeverity = EventSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (participant, budget_item, expense, settings)"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Id or position of the entity the change relates to"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    topics: list[ChangeTopic] = Field(
        default_factory=list,
        description="Views that should refresh after this change"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "topics": [topic.value for topic in self.topics],
        }


class ChangeEventBuilder:
    """
    Helper class to build change events with common patterns.

    Usage:
        event = ChangeEventBuilder.participant_created("P001", "Thandi Mokoena")
        event = ChangeEventBuilder.budget_item_removed(2, "Training")
    """

    @staticmethod
    def participant_created(participant_id: str, name: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.PARTICIPANT_CREATED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant {name} added",
            details={"name": name},
            topics=list(PARTICIPANT_TOPICS),
        )

    @staticmethod
    def participant_removed(participant_id: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.PARTICIPANT_REMOVED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant {participant_id} removed",
            topics=list(PARTICIPANT_TOPICS),
        )

    @staticmethod
    def participant_completed(participant_id: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.PARTICIPANT_COMPLETED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant {participant_id} marked as completed",
            topics=list(PARTICIPANT_TOPICS),
        )

    @staticmethod
    def budget_item_created(category: str, amount: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.BUDGET_ITEM_CREATED,
            entity_type="budget_item",
            entity_id=category,
            description=f"Budget item {category} added",
            details={"category": category, "amount": amount},
            topics=list(FINANCIAL_TOPICS),
        )

    @staticmethod
    def budget_item_removed(index: int, category: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.BUDGET_ITEM_REMOVED,
            entity_type="budget_item",
            entity_id=str(index),
            description=f"Budget item {category} removed",
            details={"index": index, "category": category},
            topics=list(FINANCIAL_TOPICS),
        )

    @staticmethod
    def expense_created(expense_id: str, category: str, amount: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.EXPENSE_CREATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense {expense_id} of {amount} added to {category}",
            details={"category": category, "amount": amount},
            topics=list(FINANCIAL_TOPICS),
        )

    @staticmethod
    def theme_changed(theme: str) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.THEME_CHANGED,
            entity_type="settings",
            description=f"Theme set to {theme}",
            details={"theme": theme},
        )

    @staticmethod
    def data_cleared() -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.DATA_CLEARED,
            severity=EventSeverity.WARNING,
            description="All data cleared",
            topics=list(ChangeTopic),
        )

    @staticmethod
    def data_imported(counts: dict[str, int]) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.DATA_IMPORTED,
            description="Backup imported",
            details=counts,
            topics=list(ChangeTopic),
        )

    @staticmethod
    def refresh_requested() -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.REFRESH_REQUESTED,
            severity=EventSeverity.DEBUG,
            description="Refresh of all views requested",
            topics=list(ChangeTopic),
        )


# =============================================================================
# USER NOTIFICATIONS
# =============================================================================

class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


NOTIFICATION_PREFIXES = {
    NotificationLevel.SUCCESS: "SUCCESS:",
    NotificationLevel.ERROR: "ERROR:",
    NotificationLevel.WARNING: "WARNING:",
    NotificationLevel.INFO: "INFO:",
}


class Notification(BaseModel):
    """
    A transient, dismissible message for the user.

    The view decides how to show it; duration_ms says how long it
    should stay up if the user does not dismiss it.
    """

    message: str
    level: NotificationLevel = NotificationLevel.SUCCESS
    duration_ms: int = Field(default=4000, ge=0)

    @property
    def text(self) -> str:
        return f"{NOTIFICATION_PREFIXES[self.level]} {self.message}"
