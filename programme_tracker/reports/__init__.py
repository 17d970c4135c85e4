"""Reports, backups and display formatting."""

from programme_tracker.reports.csv_export import to_csv
from programme_tracker.reports.exporter import (
    ReportExporter,
    build_backup,
    forecast_rows,
    monthly_budget_rows,
    parse_backup,
    participant_rows,
    roi_rows,
)
from programme_tracker.reports.formatting import format_currency, format_date

__all__ = [
    "ReportExporter",
    "build_backup",
    "format_currency",
    "format_date",
    "forecast_rows",
    "monthly_budget_rows",
    "parse_backup",
    "participant_rows",
    "roi_rows",
    "to_csv",
]
