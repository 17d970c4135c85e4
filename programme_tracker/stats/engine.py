"""
Derived Statistics Engine

Pure functions over collections of records. Nothing here reads the
store or keeps state: callers pass in a snapshot (usually fresh from the
repositories) and get back plain result models.

CRITICAL: Every division is guarded. A zero denominator yields 0 or the
NOT_AVAILABLE marker, never an exception and never a non-finite number.

Percentages are rounded half-up (40.5 -> 41), not banker's rounding.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    ParticipantStatus,
)
from programme_tracker.models.stats import (
    NOT_AVAILABLE,
    BudgetUtilization,
    DashboardStats,
    ForecastSummary,
    PerformanceClass,
    Percentage,
    RoiSummary,
)


CENT = Decimal("0.01")
HIGH_PERFORMANCE_THRESHOLD = 80
MEDIUM_PERFORMANCE_THRESHOLD = 60


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal("0"))


def success_rate(participants: Sequence[Participant]) -> int:
    """Percent of participants with status Completed; 0 for none."""
    if not participants:
        return 0
    completed = sum(
        1 for p in participants if p.status == ParticipantStatus.COMPLETED.value
    )
    return round_half_up(Decimal(100 * completed) / Decimal(len(participants)))


def program_count(participants: Sequence[Participant]) -> int:
    """Number of distinct programmes participants are enrolled in."""
    return len({p.programme for p in participants})


def utilization_percent(spent: Decimal, budget: Decimal) -> Percentage:
    """Rounded percent of budget spent, or N/A when the budget is zero."""
    if budget == 0:
        return NOT_AVAILABLE
    return round_half_up(spent * 100 / budget)


def spent_by_category(expenses: Sequence[Expense]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, Decimal("0")) + expense.amount
    return totals


def budget_utilization(
    budget_items: Sequence[BudgetItem],
    expenses: Sequence[Expense],
) -> dict[str, BudgetUtilization]:
    """
    Spending against each budget category, in budget order.

    Expenses are matched to budget items by exact category text.
    Expenses in categories without a budget item are not listed.
    """
    spent = spent_by_category(expenses)
    table = {}
    for item in budget_items:
        item_spent = spent.get(item.category, Decimal("0"))
        table[item.category] = BudgetUtilization(
            category=item.category,
            budget=item.amount,
            spent=item_spent,
            remaining=item.amount - item_spent,
            utilization=utilization_percent(item_spent, item.amount),
        )
    return table


def forecast(
    budget_items: Sequence[BudgetItem],
    expenses: Sequence[Expense],
) -> ForecastSummary:
    """
    Totals and a naive projection.

    There is no time series behind the projection: the projected burn is
    simply the average expense.
    """
    total_budget = _sum(item.amount for item in budget_items)
    total_expenses = _sum(expense.amount for expense in expenses)
    average = to_cents(total_expenses / len(expenses)) if expenses else Decimal("0")

    return ForecastSummary(
        total_budget=total_budget,
        total_expenses=total_expenses,
        remaining=total_budget - total_expenses,
        average_expense=average,
        projected_burn=average,
    )


def roi(
    participants: Sequence[Participant],
    budget_items: Sequence[BudgetItem],
) -> RoiSummary:
    """Revenue and jobs generated against the total budget invested."""
    total_investment = _sum(item.amount for item in budget_items)
    total_revenue = _sum(p.revenue for p in participants)
    total_jobs = sum(p.jobs for p in participants)

    if total_investment > 0:
        roi_percentage = to_cents(total_revenue * 100 / total_investment)
    else:
        roi_percentage = NOT_AVAILABLE

    count = len(participants)
    return RoiSummary(
        total_investment=total_investment,
        total_revenue=total_revenue,
        total_jobs=total_jobs,
        roi_percentage=roi_percentage,
        revenue_per_participant=to_cents(total_revenue / count) if count else Decimal("0"),
        jobs_per_participant=to_cents(Decimal(total_jobs) / count) if count else Decimal("0"),
    )


def dashboard_stats(participants: Sequence[Participant]) -> DashboardStats:
    return DashboardStats(
        participant_count=len(participants),
        program_count=program_count(participants),
        success_rate=success_rate(participants),
    )


def performance_class(progress: int) -> PerformanceClass:
    if progress >= HIGH_PERFORMANCE_THRESHOLD:
        return PerformanceClass.HIGH
    if progress >= MEDIUM_PERFORMANCE_THRESHOLD:
        return PerformanceClass.MEDIUM
    return PerformanceClass.LOW
