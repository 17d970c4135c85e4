"""
Report and Backup Export

Turns the current collections into downloadable files:

- participants report     <type>-report-<date>.csv
- monthly budget report   monthly-budget-report-<date>.csv
- financial forecast      financial-forecast-<date>.csv
- ROI analysis            roi-analysis-<date>.csv
- full backup             programme-data-backup-<date>.json

Row builders are plain functions so views can show the same tables
without writing a file. Every export re-reads the repositories first.
"""

from pathlib import Path
from typing import Any, Sequence, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from programme_tracker.models.backup import BackupDocument
from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    utc_now,
)
from programme_tracker.operations.errors import ExportError
from programme_tracker.reports.csv_export import to_csv
from programme_tracker.repositories import RepositorySet
from programme_tracker.stats import budget_utilization, forecast, roi


# =============================================================================
# ROW BUILDERS
# =============================================================================

def participant_rows(participants: Sequence[Participant]) -> list[dict[str, Any]]:
    return [p.to_storage() for p in participants]


def monthly_budget_rows(
    budget_items: Sequence[BudgetItem],
    expenses: Sequence[Expense],
) -> list[dict[str, Any]]:
    return [
        {
            "Category": row.category,
            "Budget": row.budget,
            "Spent": row.spent,
            "Remaining": row.remaining,
            "Utilization": row.utilization_label,
        }
        for row in budget_utilization(budget_items, expenses).values()
    ]


def forecast_rows(
    budget_items: Sequence[BudgetItem],
    expenses: Sequence[Expense],
) -> list[dict[str, Any]]:
    summary = forecast(budget_items, expenses)
    return [
        {"Metric": "Total Budget", "Value": summary.total_budget},
        {"Metric": "Total Expenses", "Value": summary.total_expenses},
        {"Metric": "Remaining Budget", "Value": summary.remaining},
        {"Metric": "Average Expense", "Value": summary.average_expense},
        {"Metric": "Projected Monthly Burn", "Value": summary.projected_burn},
    ]


def roi_rows(
    participants: Sequence[Participant],
    budget_items: Sequence[BudgetItem],
) -> list[dict[str, Any]]:
    summary = roi(participants, budget_items)
    return [
        {"Metric": "Total Investment", "Value": summary.total_investment},
        {"Metric": "Total Revenue Generated", "Value": summary.total_revenue},
        {"Metric": "Total Jobs Created", "Value": summary.total_jobs},
        {"Metric": "ROI Percentage", "Value": summary.roi_label},
        {"Metric": "Revenue per Participant", "Value": summary.revenue_per_participant},
        {"Metric": "Jobs per Participant", "Value": summary.jobs_per_participant},
    ]


# =============================================================================
# BACKUP
# =============================================================================

def build_backup(repositories: RepositorySet) -> BackupDocument:
    """Snapshot of every slot, freshly read from the store."""
    return BackupDocument(
        participants=repositories.participants.load_all(),
        budget_items=repositories.budget_items.load_all(),
        expenses=repositories.expenses.load_all(),
        settings=repositories.settings.reload(),
    )


def parse_backup(text: Union[str, bytes]) -> BackupDocument:
    """
    Read a backup file's contents.

    Raises:
        ExportError: The text is not a valid backup document
    """
    try:
        return BackupDocument.model_validate_json(text)
    except PydanticValidationError as e:
        raise ExportError(f"Not a valid backup file: {e.error_count()} problem(s) found") from e


# =============================================================================
# FILE EXPORT
# =============================================================================

class ReportExporter:
    """Writes reports and backups into the export directory."""

    def __init__(self, repositories: RepositorySet, export_dir: Union[Path, str]):
        self._repos = repositories
        self._export_dir = Path(export_dir)
        self._logger = structlog.get_logger()

    @property
    def export_dir(self) -> Path:
        return self._export_dir

    def _stamp(self) -> str:
        return utc_now().date().isoformat()

    def _write(self, filename: str, content: str) -> Path:
        try:
            self._export_dir.mkdir(parents=True, exist_ok=True)
            path = self._export_dir / filename
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            self._logger.error("export_failed", filename=filename, error=str(e))
            raise ExportError(f"Failed to write {filename}: {e}") from e

        self._logger.info("export_written", path=str(path), size=len(content))
        return path

    def write_csv(self, rows: Sequence[dict[str, Any]], filename: str) -> Path:
        return self._write(filename, to_csv(rows))

    def participants_report(self, report_type: str = "comprehensive") -> Path:
        rows = participant_rows(self._repos.participants.load_all())
        return self.write_csv(rows, f"{report_type}-report-{self._stamp()}.csv")

    def monthly_budget_report(self) -> Path:
        rows = monthly_budget_rows(
            self._repos.budget_items.load_all(),
            self._repos.expenses.load_all(),
        )
        return self.write_csv(rows, f"monthly-budget-report-{self._stamp()}.csv")

    def forecast_report(self) -> Path:
        rows = forecast_rows(
            self._repos.budget_items.load_all(),
            self._repos.expenses.load_all(),
        )
        return self.write_csv(rows, f"financial-forecast-{self._stamp()}.csv")

    def roi_report(self) -> Path:
        rows = roi_rows(
            self._repos.participants.load_all(),
            self._repos.budget_items.load_all(),
        )
        return self.write_csv(rows, f"roi-analysis-{self._stamp()}.csv")

    def export_backup(self) -> Path:
        document = build_backup(self._repos)
        return self._write(
            f"programme-data-backup-{self._stamp()}.json",
            document.to_json(),
        )

    def read_backup(self, path: Union[Path, str]) -> BackupDocument:
        """
        Load a backup file.

        Raises:
            ExportError: The file is missing, unreadable or not a backup
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Could not read backup {path}: {e}") from e
        return parse_backup(text)
