"""
Core Record Models for Programme Tracker

These models define the schemas of everything the tracker persists:
participants, budget items, expenses and the settings record.

They are designed to:
1. Enforce types when records are loaded from the store
2. Serialize to the camelCase JSON layout used by the persisted slots
3. Preserve unknown fields, so records written by older tools survive a round trip

DESIGN DECISION: Amounts are Decimal in memory and JSON numbers on disk.
Arithmetic never touches floats; only the serialized form does.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _decimal_to_json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Longest name or category a record may hold
MAX_TEXT_LENGTH = 200


# Non-negative amount, written as a plain JSON number
Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(_decimal_to_json_number, return_type=int | float, when_used="json"),
]

# Signed amount (participant revenue may be corrected downwards)
SignedAmount = Annotated[
    Decimal,
    PlainSerializer(_decimal_to_json_number, return_type=int | float, when_used="json"),
]


# =============================================================================
# ENUMS - Canonical values (stored fields stay free text where the UI allows it)
# =============================================================================

class ParticipantStatus(str, Enum):
    """
    Known participant statuses.

    The stored status is free text; only these two values carry meaning
    for the statistics engine.
    """
    ACTIVE = "Active"
    COMPLETED = "Completed"


class BudgetPriority(str, Enum):
    """Priority labels offered by the budget form."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Theme(str, Enum):
    """Display theme preference."""
    LIGHT = "light"
    DARK = "dark"


class Programme(str, Enum):
    """Canonical programme keys offered by the participant form."""
    ENTREPRENEURSHIP = "entrepreneurship"
    SKILLS = "skills"
    LEADERSHIP = "leadership"
    CUSTOM = "custom"  # Resolved to a user-supplied name on create


PROGRAMME_DISPLAY_NAMES = {
    Programme.ENTREPRENEURSHIP.value: "Entrepreneurship Training",
    Programme.SKILLS.value: "Skills Development",
    Programme.LEADERSHIP.value: "Leadership Programme",
}


def format_programme_name(programme: str) -> str:
    """Display name for a programme key; custom names pass through."""
    return PROGRAMME_DISPLAY_NAMES.get(programme, programme)


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

class TrackerRecord(BaseModel):
    """
    Base for every persisted record.

    Field names are snake_case in Python and camelCase in storage.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="allow",
    )

    def to_storage(self) -> dict:
        """JSON-ready dict in the persisted layout."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Participant(TrackerRecord):
    """
    A programme participant.

    Ids look like P001, P002, ... and email addresses are unique
    across the collection (enforced by the mutation layer).
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Participant id (P + zero-padded number)"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TEXT_LENGTH,
        description="Full name"
    )
    email: str = Field(
        ...,
        min_length=3,
        description="Contact email (unique)"
    )
    phone: str = Field(
        default="",
        description="Contact phone number"
    )
    programme: str = Field(
        ...,
        min_length=1,
        description="Programme key or custom programme name"
    )
    start_date: date = Field(
        ...,
        description="Date the participant joined the programme"
    )
    progress: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Progress through the programme in percent"
    )
    status: str = Field(
        default=ParticipantStatus.ACTIVE.value,
        description="Active, Completed, or another free-text status"
    )
    notes: str = ""

    # Outcome counters
    attendance: int = Field(default=0, ge=0)
    revenue: SignedAmount = Field(
        default=Decimal("0"),
        description="Revenue generated by the participant"
    )
    jobs: int = Field(
        default=0,
        ge=0,
        description="Jobs created by the participant"
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == ParticipantStatus.COMPLETED.value


class BudgetItem(TrackerRecord):
    """
    A budget line.

    Budget items have no id; they are addressed by position and their
    category is unique (case-insensitive) across the collection.
    """

    category: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TEXT_LENGTH,
        description="Budget category (unique, case-insensitive)"
    )
    amount: Money = Field(
        ...,
        description="Budgeted amount"
    )
    priority: str = Field(
        ...,
        min_length=1,
        description="High, Medium, Low, or another label"
    )
    description: str = ""
    date_added: date = Field(default_factory=date.today)
    created_at: datetime = Field(default_factory=utc_now)


class Expense(TrackerRecord):
    """
    A recorded expense.

    The category is expected to match a budget category for reporting,
    but nothing enforces it.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Expense id (EXP + zero-padded number)"
    )
    category: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    amount: Money
    expense_date: date = Field(
        ...,
        alias="date",
        description="Date the expense was incurred"
    )
    description: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)


class UserSettings(TrackerRecord):
    """The single settings record."""

    theme: Theme = Theme.LIGHT

    def toggled(self) -> "UserSettings":
        """Copy of these settings with the other theme selected."""
        other = Theme.LIGHT if self.theme == Theme.DARK else Theme.DARK
        return self.model_copy(update={"theme": other})
