"""Derived statistics package."""

from programme_tracker.stats.engine import (
    budget_utilization,
    dashboard_stats,
    forecast,
    performance_class,
    program_count,
    roi,
    round_half_up,
    spent_by_category,
    success_rate,
    utilization_percent,
)

__all__ = [
    "budget_utilization",
    "dashboard_stats",
    "forecast",
    "performance_class",
    "program_count",
    "roi",
    "round_half_up",
    "spent_by_category",
    "success_rate",
    "utilization_percent",
]
