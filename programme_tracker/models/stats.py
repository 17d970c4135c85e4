"""
Derived Statistics Models

Results of the statistics engine. None of these are persisted; they are
recomputed from the current collections whenever a view asks.

CRITICAL: No field here ever holds Infinity or NaN. Divisions that have
no meaningful answer produce 0 or the NOT_AVAILABLE marker instead.
"""

from decimal import Decimal
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field


NOT_AVAILABLE = "N/A"

# A rounded percentage, or the marker when the denominator was zero
Percentage = Union[int, Literal["N/A"]]


class PerformanceClass(str, Enum):
    """Progress band used by the performance grid."""
    HIGH = "high-performance"
    MEDIUM = "medium-performance"
    LOW = "low-performance"


class BudgetUtilization(BaseModel):
    """Spending against one budget category."""

    category: str
    budget: Decimal
    spent: Decimal
    remaining: Decimal
    utilization: Percentage = Field(
        ...,
        description="Rounded percent of budget spent, or N/A for a zero budget"
    )

    @property
    def utilization_label(self) -> str:
        if self.utilization == NOT_AVAILABLE:
            return NOT_AVAILABLE
        return f"{self.utilization}%"


class ForecastSummary(BaseModel):
    """Budget versus expenses, with a naive burn projection."""

    total_budget: Decimal
    total_expenses: Decimal
    remaining: Decimal
    average_expense: Decimal = Field(
        ...,
        description="Mean expense amount, 0 when no expenses exist"
    )
    projected_burn: Decimal = Field(
        ...,
        description="Projected spend per period (equal to the average expense)"
    )


class RoiSummary(BaseModel):
    """Return on the programme investment."""

    total_investment: Decimal
    total_revenue: Decimal
    total_jobs: int
    roi_percentage: Union[Decimal, Literal["N/A"]] = Field(
        ...,
        description="Revenue over investment in percent, N/A when nothing was invested"
    )
    revenue_per_participant: Decimal
    jobs_per_participant: Decimal

    @property
    def roi_label(self) -> str:
        if self.roi_percentage == NOT_AVAILABLE:
            return NOT_AVAILABLE
        return f"{self.roi_percentage}%"


class DashboardStats(BaseModel):
    """Headline numbers shown on the landing and dashboard pages."""

    participant_count: int = Field(ge=0)
    program_count: int = Field(ge=0)
    success_rate: int = Field(ge=0, le=100)
