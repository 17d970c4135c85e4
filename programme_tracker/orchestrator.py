"""
Main Orchestrator for Programme Tracker

This module ties together all the components and is the only thing the
view layer talks to.

DESIGN DECISION: The orchestrator is the error boundary.
- Mutations, reports and imports raise OperationError subclasses
- Every public action here catches them and returns an OperationOutcome
  carrying a transient Notification for the user
- Nothing that goes wrong in one action stops the next one from running

Statistics are computed on demand from freshly loaded collections;
they are never stored.
"""

from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict

from programme_tracker.config import AppSettings, StorageSettings, get_settings
from programme_tracker.events import ChangeNotifier, Listener, configure_logging
from programme_tracker.models.events import (
    ChangeEventBuilder,
    ChangeTopic,
    Notification,
    NotificationLevel,
)
from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    Theme,
    UserSettings,
)
from programme_tracker.models.stats import (
    BudgetUtilization,
    DashboardStats,
    ForecastSummary,
    RoiSummary,
)
from programme_tracker.operations import MutationService, OperationError
from programme_tracker.reports import ReportExporter, format_currency
from programme_tracker.repositories import RepositorySet
from programme_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    StoreAdapter,
)
from programme_tracker import stats


REPORT_KINDS = ("participants", "monthly", "forecast", "roi")


class OperationOutcome(BaseModel):
    """What a user action produced: a value on success, and a message either way."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    notification: Notification
    value: Any = None


class ProgrammeTracker:
    """
    Facade over repositories, mutations, statistics and exports.

    Views call the action methods and show the returned notification;
    they read data through the load/stat methods and register listeners
    with subscribe() to hear about changes.
    """

    def __init__(
        self,
        repositories: RepositorySet,
        notifier: ChangeNotifier,
        mutations: MutationService,
        exporter: ReportExporter,
        app_settings: Optional[AppSettings] = None,
    ):
        self._repos = repositories
        self._notifier = notifier
        self._mutations = mutations
        self._exporter = exporter
        self._app_settings = app_settings or AppSettings()
        self._logger = structlog.get_logger()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @property
    def repositories(self) -> RepositorySet:
        return self._repos

    @property
    def exporter(self) -> ReportExporter:
        return self._exporter

    def _notification(self, message: str, level: NotificationLevel) -> Notification:
        return Notification(
            message=message,
            level=level,
            duration_ms=self._app_settings.notification_duration_ms,
        )

    def _run(
        self,
        action: str,
        operation: Callable[[], Any],
        success_message: Callable[[Any], str],
    ) -> OperationOutcome:
        try:
            value = operation()
        except OperationError as e:
            self._logger.warning(
                "operation_failed",
                action=action,
                error=e.message,
                error_type=type(e).__name__,
            )
            return OperationOutcome(
                success=False,
                notification=self._notification(e.message, NotificationLevel.ERROR),
            )

        return OperationOutcome(
            success=True,
            value=value,
            notification=self._notification(success_message(value), NotificationLevel.SUCCESS),
        )

    def subscribe(
        self,
        listener: Listener,
        topics: Optional[Iterable[ChangeTopic]] = None,
    ) -> Listener:
        return self._notifier.subscribe(listener, topics)

    def unsubscribe(self, listener: Listener) -> None:
        self._notifier.unsubscribe(listener)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def participants(self) -> list[Participant]:
        return self._repos.participants.load_all()

    def budget_items(self) -> list[BudgetItem]:
        return self._repos.budget_items.load_all()

    def expenses(self) -> list[Expense]:
        return self._repos.expenses.load_all()

    def user_settings(self) -> UserSettings:
        return self._repos.settings.current

    @property
    def theme(self) -> Theme:
        return self._repos.settings.current.theme

    def format_amount(self, amount) -> str:
        return format_currency(amount, self._app_settings.currency_symbol)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def dashboard_stats(self) -> DashboardStats:
        return stats.dashboard_stats(self.participants())

    def success_rate(self) -> int:
        return stats.success_rate(self.participants())

    def budget_utilization(self) -> dict[str, BudgetUtilization]:
        return stats.budget_utilization(self.budget_items(), self.expenses())

    def forecast(self) -> ForecastSummary:
        return stats.forecast(self.budget_items(), self.expenses())

    def roi(self) -> RoiSummary:
        return stats.roi(self.participants(), self.budget_items())

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_participant(self, fields: dict) -> OperationOutcome:
        return self._run(
            "add_participant",
            lambda: self._mutations.create_participant(fields),
            lambda p: f"Participant {p.name} added successfully!",
        )

    def remove_participant(self, participant_id: str) -> OperationOutcome:
        return self._run(
            "remove_participant",
            lambda: self._mutations.remove_participant(participant_id),
            lambda _: "Participant removed successfully",
        )

    def mark_participant_completed(self, participant_id: str) -> OperationOutcome:
        return self._run(
            "mark_completed",
            lambda: self._mutations.mark_completed(participant_id),
            lambda p: f"Participant {p.name} marked as completed",
        )

    def add_budget_item(self, fields: dict) -> OperationOutcome:
        return self._run(
            "add_budget_item",
            lambda: self._mutations.create_budget_item(fields),
            lambda item: f'Budget item "{item.category}" added successfully!',
        )

    def remove_budget_item(self, index: int) -> OperationOutcome:
        return self._run(
            "remove_budget_item",
            lambda: self._mutations.remove_budget_item(index),
            lambda _: "Budget item removed successfully",
        )

    def add_expense(self, fields: dict) -> OperationOutcome:
        return self._run(
            "add_expense",
            lambda: self._mutations.create_expense(fields),
            lambda e: f"Expense of {self.format_amount(e.amount)} added successfully!",
        )

    def toggle_theme(self) -> OperationOutcome:
        return self._run(
            "toggle_theme",
            self._mutations.toggle_theme,
            lambda s: f"Switched to {s.theme.value} mode",
        )

    def clear_all_data(self) -> OperationOutcome:
        return self._run(
            "clear_all_data",
            self._mutations.clear_all_data,
            lambda _: "All data cleared",
        )

    def generate_report(self, kind: str = "participants", report_type: str = "comprehensive") -> OperationOutcome:
        """Write one of the CSV reports (participants, monthly, forecast, roi)."""
        writers = {
            "participants": lambda: self._exporter.participants_report(report_type),
            "monthly": self._exporter.monthly_budget_report,
            "forecast": self._exporter.forecast_report,
            "roi": self._exporter.roi_report,
        }
        if kind not in writers:
            return OperationOutcome(
                success=False,
                notification=self._notification(
                    f"Unknown report: {kind}", NotificationLevel.ERROR
                ),
            )
        return self._run(
            f"report_{kind}",
            writers[kind],
            lambda path: f"Report saved to {path}",
        )

    def export_backup(self) -> OperationOutcome:
        return self._run(
            "export_backup",
            self._exporter.export_backup,
            lambda path: f"Data exported successfully to {path}",
        )

    def import_backup(self, path: Union[Path, str]) -> OperationOutcome:
        return self._run(
            "import_backup",
            lambda: self._mutations.import_backup(self._exporter.read_backup(path)),
            lambda counts: (
                f"Backup imported: {counts['participants']} participants, "
                f"{counts['budgetItems']} budget items, {counts['expenses']} expenses"
            ),
        )

    def refresh(self) -> OperationOutcome:
        """Reload every collection and ask all views to redraw."""
        self._repos.reload_all()
        delivered = self._notifier.notify(ChangeEventBuilder.refresh_requested())
        return OperationOutcome(
            success=True,
            value=delivered,
            notification=self._notification(
                "Dashboard refreshed successfully!", NotificationLevel.SUCCESS
            ),
        )


def create_store(storage_settings: StorageSettings) -> KeyValueStore:
    """Build the key-value store selected by configuration."""
    if storage_settings.backend == "memory":
        return InMemoryStore(quota_bytes=storage_settings.quota_bytes)
    return JsonFileStore(storage_settings.data_dir, quota_bytes=storage_settings.quota_bytes)


def create_app_components(
    store: Optional[KeyValueStore] = None,
    app_settings: Optional[AppSettings] = None,
    storage_settings: Optional[StorageSettings] = None,
) -> ProgrammeTracker:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. Built from configuration when omitted.
        app_settings: Application settings. Loaded from the environment when omitted.
        storage_settings: Storage settings, used only when store is omitted.

    Returns:
        A ready ProgrammeTracker
    """
    settings = get_settings()
    app_settings = app_settings or settings.app
    configure_logging(app_settings.log_level)

    if store is None:
        store = create_store(storage_settings or settings.storage)

    adapter = StoreAdapter(store)
    repositories = RepositorySet(adapter, Theme(app_settings.default_theme))
    notifier = ChangeNotifier()
    mutations = MutationService(repositories, notifier)
    exporter = ReportExporter(repositories, app_settings.export_dir)

    return ProgrammeTracker(
        repositories=repositories,
        notifier=notifier,
        mutations=mutations,
        exporter=exporter,
        app_settings=app_settings,
    )
