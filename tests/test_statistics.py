"""
Tests for the statistics engine.

No statistic may ever raise on an empty or zero-valued input, and none
may produce a non-finite number.
"""

from datetime import date
from decimal import Decimal

import pytest

from programme_tracker.models import (
    NOT_AVAILABLE,
    BudgetItem,
    Expense,
    Participant,
    PerformanceClass,
)
from programme_tracker.stats import (
    budget_utilization,
    dashboard_stats,
    forecast,
    performance_class,
    program_count,
    roi,
    round_half_up,
    success_rate,
    utilization_percent,
)


def participants_with(statuses, programme="skills", **fields):
    return [
        Participant(
            id=f"P{n:03d}",
            name=f"Participant {n}",
            email=f"p{n}@example.com",
            programme=programme,
            start_date=date(2026, 1, 1),
            status=status,
            **fields,
        )
        for n, status in enumerate(statuses, start=1)
    ]


def budget(category, amount):
    return BudgetItem(category=category, amount=Decimal(amount), priority="High")


def expense(number, category, amount):
    return Expense(
        id=f"EXP{number:03d}",
        category=category,
        amount=Decimal(amount),
        date=date(2026, 3, number),
        description=f"Expense {number}",
    )


class TestSuccessRate:
    """Tests for the completion percentage."""

    def test_empty_is_zero(self):
        """Test no participants gives 0 rather than a division error."""
        assert success_rate([]) == 0

    def test_half_completed(self):
        """Test one Completed and one Active gives 50."""
        assert success_rate(participants_with(["Completed", "Active"])) == 50

    def test_rounds_half_up(self):
        """Test 1 of 8 (12.5%) rounds up to 13."""
        assert success_rate(participants_with(["Completed"] + ["Active"] * 7)) == 13

    def test_thirds(self):
        """Test 2 of 3 rounds to 67."""
        assert success_rate(participants_with(["Completed", "Completed", "Active"])) == 67

    def test_other_statuses_count_as_not_completed(self):
        """Test free-text statuses are in the denominator only."""
        assert success_rate(participants_with(["Completed", "On hold"])) == 50


class TestBudgetUtilization:
    """Tests for per-category spending."""

    def test_training_scenario(self):
        """Test a 1000 budget with 250 and 150 spent."""
        table = budget_utilization(
            [budget("Training", "1000")],
            [expense(1, "Training", "250"), expense(2, "Training", "150")],
        )
        row = table["Training"]
        assert row.spent == Decimal("400")
        assert row.remaining == Decimal("600")
        assert row.utilization == 40
        assert row.utilization_label == "40%"

    def test_zero_budget_is_not_available(self):
        """Test a zero budget reports N/A instead of dividing by zero."""
        table = budget_utilization([budget("Marketing", "0")], [expense(1, "Marketing", "10")])
        assert table["Marketing"].utilization == NOT_AVAILABLE
        assert table["Marketing"].remaining == Decimal("-10")

    def test_overspend_exceeds_100(self):
        """Test utilization is not capped."""
        table = budget_utilization([budget("Catering", "100")], [expense(1, "Catering", "150")])
        assert table["Catering"].utilization == 150

    def test_unbudgeted_expenses_are_not_listed(self):
        """Test expenses in categories without a budget item are ignored."""
        table = budget_utilization([budget("Training", "100")], [expense(1, "Transport", "50")])
        assert list(table) == ["Training"]
        assert table["Training"].spent == 0

    def test_keeps_budget_order(self):
        """Test rows follow the order of the budget items."""
        table = budget_utilization([budget("Zeta", "1"), budget("Alpha", "1")], [])
        assert list(table) == ["Zeta", "Alpha"]

    def test_utilization_percent_rounding(self):
        """Test half-up rounding of utilization."""
        assert utilization_percent(Decimal("1"), Decimal("8")) == 13
        assert round_half_up(Decimal("40.5")) == 41


class TestForecastAndRoi:
    """Tests for the forecast and ROI summaries."""

    def test_forecast_without_expenses(self):
        """Test the average is 0 when there are no expenses."""
        summary = forecast([budget("Training", "1000")], [])
        assert summary.total_budget == Decimal("1000")
        assert summary.average_expense == 0
        assert summary.remaining == Decimal("1000")

    def test_forecast_average_to_cents(self):
        """Test the average expense is rounded half-up to cents."""
        summary = forecast(
            [budget("Training", "1000")],
            [expense(1, "Training", "100"), expense(2, "Training", "50.25")],
        )
        assert summary.total_expenses == Decimal("150.25")
        assert summary.average_expense == Decimal("75.13")
        assert summary.projected_burn == summary.average_expense

    def test_roi_without_investment(self):
        """Test ROI is N/A when nothing was budgeted."""
        summary = roi(participants_with(["Active"], revenue=Decimal("100")), [])
        assert summary.roi_percentage == NOT_AVAILABLE
        assert summary.roi_label == NOT_AVAILABLE

    def test_roi_percentage(self):
        """Test revenue and jobs against the investment."""
        summary = roi(
            participants_with(["Active", "Completed"], revenue=Decimal("250"), jobs=3),
            [budget("Training", "1000")],
        )
        assert summary.total_revenue == Decimal("500")
        assert summary.total_jobs == 6
        assert summary.roi_percentage == Decimal("50.00")
        assert summary.revenue_per_participant == Decimal("250.00")
        assert summary.jobs_per_participant == Decimal("3.00")

    def test_roi_without_participants(self):
        """Test per-participant figures are 0 for an empty cohort."""
        summary = roi([], [budget("Training", "1000")])
        assert summary.revenue_per_participant == 0
        assert summary.jobs_per_participant == 0


class TestDashboard:
    """Tests for headline numbers and performance bands."""

    def test_dashboard_stats(self):
        """Test counts of participants and distinct programmes."""
        cohort = participants_with(["Completed", "Active"]) + participants_with(
            ["Active"], programme="leadership"
        )
        stats = dashboard_stats(cohort)
        assert stats.participant_count == 3
        assert stats.program_count == 2
        assert stats.success_rate == 33

    def test_program_count_empty(self):
        """Test no participants means no programmes."""
        assert program_count([]) == 0

    @pytest.mark.parametrize("progress,expected", [
        (100, PerformanceClass.HIGH),
        (80, PerformanceClass.HIGH),
        (79, PerformanceClass.MEDIUM),
        (60, PerformanceClass.MEDIUM),
        (59, PerformanceClass.LOW),
        (0, PerformanceClass.LOW),
    ])
    def test_performance_class(self, progress, expected):
        """Test the progress bands."""
        assert performance_class(progress) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
