"""
Form Input Models

Raw field values as they arrive from a form. Everything is optional text
here: deciding what is missing or malformed is the validator's job, so
these models never reject input themselves.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FormInput(BaseModel):
    """Base for form payloads: blank strings become None, values become text."""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, datetime):
            v = v.date()
        if isinstance(v, date):
            v = v.isoformat()
        text = str(v).strip()
        return text or None


class ParticipantForm(FormInput):
    """Fields of the "add participant" form."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    programme: Optional[str] = None
    custom_programme: Optional[str] = Field(default=None, alias="customProgramme")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    notes: Optional[str] = None


class BudgetItemForm(FormInput):
    """Fields of the "add budget item" form."""

    category: Optional[str] = None
    amount: Optional[str] = None
    priority: Optional[str] = None
    description: Optional[str] = None


class ExpenseForm(FormInput):
    """Fields of the "add expense" form."""

    category: Optional[str] = None
    amount: Optional[str] = None
    expense_date: Optional[str] = Field(default=None, alias="date")
    description: Optional[str] = None
