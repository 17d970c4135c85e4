"""
Mutation Operations

Every change to the tracker's data goes through MutationService.

Flow for each operation:
1. Reload the target collection from the store
2. Validate the input against it (nothing is written if it is invalid)
3. Apply the change in memory
4. Persist the collection (one write)
5. Announce a ChangeEvent to registered listeners

If step 4 fails, StorageError is raised and no event is announced. The
in-memory repository keeps the change until its next reload.

A collection whose slot could not be fully read is never written: step 1
raises StorageError instead, leaving the stored records as they are.
"""

from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from programme_tracker.events import ChangeNotifier
from programme_tracker.models.backup import BackupDocument
from programme_tracker.models.events import ChangeEvent, ChangeEventBuilder
from programme_tracker.models.forms import (
    BudgetItemForm,
    ExpenseForm,
    FormInput,
    ParticipantForm,
)
from programme_tracker.models.records import (
    BudgetItem,
    Expense,
    Participant,
    ParticipantStatus,
    Theme,
    UserSettings,
    utc_now,
)
from programme_tracker.operations.errors import (
    NotFoundError,
    OutOfRangeError,
    StorageError,
    ValidationError,
)
from programme_tracker.repositories import RepositorySet
from programme_tracker.validation import (
    RecordValidator,
    parse_amount,
    parse_date,
    resolve_programme,
)


FormFields = Union[dict[str, Any], FormInput]


class MutationService:
    """
    Validated create/update/delete operations for every entity.

    The service holds no data of its own; the repositories do.
    """

    def __init__(
        self,
        repositories: RepositorySet,
        notifier: Optional[ChangeNotifier] = None,
        validator: Optional[RecordValidator] = None,
    ):
        self._repos = repositories
        self._notifier = notifier or ChangeNotifier()
        self._validator = validator or RecordValidator()

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def _form(self, form_type: type[FormInput], fields: FormFields) -> FormInput:
        if isinstance(fields, form_type):
            return fields
        return form_type.model_validate(fields)

    def _load(self, repository, description: str) -> list:
        existing = repository.reload()
        if not repository.readable:
            raise StorageError(
                f"Stored {description} could not be fully read; not overwriting them",
                key=repository.storage_key,
            )
        return existing

    def _build(self, record_type: type, **fields):
        try:
            return record_type(**fields)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"{field}: {first['msg']}") from e

    def _persist(self, repository, description: str) -> None:
        if not repository.persist():
            raise StorageError(
                f"Could not save {description}; the change is not durable",
                key=repository.storage_key,
            )

    def _announce(self, event: ChangeEvent) -> None:
        self._notifier.notify(event)

    def _reject(self, result) -> ValidationError:
        return ValidationError(
            self._validator.get_user_friendly_summary(result),
            result,
        )

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def create_participant(self, fields: FormFields) -> Participant:
        """
        Add a participant from form input.

        Raises:
            ValidationError: Missing field, bad email or date, duplicate email
            StorageError: The collection could not be written
        """
        form = self._form(ParticipantForm, fields)
        repository = self._repos.participants
        existing = self._load(repository, "participants")

        result = self._validator.validate_participant(form, existing)
        if not result.is_valid:
            raise self._reject(result)

        participant = self._build(
            Participant,
            id=repository.next_id(),
            name=form.name,
            email=form.email,
            phone=form.phone or "",
            programme=resolve_programme(form),
            start_date=parse_date(form.start_date),
            progress=0,
            status=ParticipantStatus.ACTIVE.value,
            notes=form.notes or "",
            attendance=0,
            revenue=0,
            jobs=0,
            created_at=utc_now(),
        )

        repository.replace(existing + [participant])
        self._persist(repository, "participants")
        self._announce(ChangeEventBuilder.participant_created(participant.id, participant.name))
        return participant

    def remove_participant(self, participant_id: str) -> Participant:
        """
        Remove a participant by id.

        Raises:
            NotFoundError: No participant has this id
        """
        repository = self._repos.participants
        existing = self._load(repository, "participants")
        index = repository.index_of(participant_id)
        if index < 0:
            raise NotFoundError(f"Participant not found: {participant_id}")

        removed = existing[index]
        repository.replace(existing[:index] + existing[index + 1:])
        self._persist(repository, "participants")
        self._announce(ChangeEventBuilder.participant_removed(participant_id))
        return removed

    def mark_completed(self, participant_id: str) -> Participant:
        """
        Mark a participant's programme as completed.

        Raises:
            NotFoundError: No participant has this id
        """
        repository = self._repos.participants
        existing = self._load(repository, "participants")
        index = repository.index_of(participant_id)
        if index < 0:
            raise NotFoundError(f"Participant not found: {participant_id}")

        updated = existing[index].model_copy(update={
            "status": ParticipantStatus.COMPLETED.value,
            "updated_at": utc_now(),
        })
        existing[index] = updated
        repository.replace(existing)
        self._persist(repository, "participants")
        self._announce(ChangeEventBuilder.participant_completed(participant_id))
        return updated

    # ------------------------------------------------------------------
    # Budget items
    # ------------------------------------------------------------------

    def create_budget_item(self, fields: FormFields) -> BudgetItem:
        """
        Add a budget line.

        Raises:
            ValidationError: Missing field, bad amount, or the category
                             already exists (case-insensitive)
        """
        form = self._form(BudgetItemForm, fields)
        repository = self._repos.budget_items
        existing = self._load(repository, "budget items")

        result = self._validator.validate_budget_item(form, existing)
        if not result.is_valid:
            raise self._reject(result)

        now = utc_now()
        item = self._build(
            BudgetItem,
            category=form.category,
            amount=parse_amount(form.amount),
            priority=form.priority,
            description=form.description or "",
            date_added=now.date(),
            created_at=now,
        )

        repository.replace(existing + [item])
        self._persist(repository, "budget items")
        self._announce(ChangeEventBuilder.budget_item_created(item.category, str(item.amount)))
        return item

    def remove_budget_item(self, index: int) -> BudgetItem:
        """
        Remove the budget line at a position.

        Raises:
            OutOfRangeError: index is outside [0, len)
        """
        repository = self._repos.budget_items
        existing = self._load(repository, "budget items")
        if isinstance(index, bool) or not 0 <= index < len(existing):
            raise OutOfRangeError(
                f"Budget item not found at position {index}",
                index=index,
                length=len(existing),
            )

        removed = existing.pop(index)
        repository.replace(existing)
        self._persist(repository, "budget items")
        self._announce(ChangeEventBuilder.budget_item_removed(index, removed.category))
        return removed

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def create_expense(self, fields: FormFields) -> Expense:
        """
        Record an expense.

        The category is not checked against the budget; an unknown
        category simply shows up with no budget in reports.

        Raises:
            ValidationError: Missing field, bad amount or date
        """
        form = self._form(ExpenseForm, fields)
        repository = self._repos.expenses
        existing = self._load(repository, "expenses")

        result = self._validator.validate_expense(form)
        if not result.is_valid:
            raise self._reject(result)

        expense = self._build(
            Expense,
            id=repository.next_id(),
            category=form.category,
            amount=parse_amount(form.amount),
            expense_date=parse_date(form.expense_date),
            description=form.description,
            created_at=utc_now(),
        )

        repository.replace(existing + [expense])
        self._persist(repository, "expenses")
        self._announce(ChangeEventBuilder.expense_created(
            expense.id, expense.category, str(expense.amount)
        ))
        return expense

    # ------------------------------------------------------------------
    # Settings and bulk operations
    # ------------------------------------------------------------------

    def set_theme(self, theme: Union[Theme, str]) -> UserSettings:
        """Select a theme and persist it immediately."""
        try:
            selected = Theme(theme)
        except ValueError:
            raise ValidationError(f"Unknown theme: {theme}")

        repository = self._repos.settings
        updated = repository.current.model_copy(update={"theme": selected})
        repository.replace(updated)
        self._persist(repository, "settings")
        self._announce(ChangeEventBuilder.theme_changed(selected.value))
        return updated

    def toggle_theme(self) -> UserSettings:
        """Switch between light and dark."""
        return self.set_theme(self._repos.settings.current.toggled().theme)

    def clear_all_data(self) -> None:
        """
        Delete every persisted slot and reset to an empty tracker.

        Raises:
            StorageError: Some slot could not be removed
        """
        if not self._repos.clear_all():
            raise StorageError("Some data could not be cleared", key="*")
        self._announce(ChangeEventBuilder.data_cleared())

    def import_backup(self, document: BackupDocument) -> dict[str, int]:
        """
        Replace all collections with the contents of a backup.

        Writes are best-effort and NOT atomic across slots.

        Raises:
            StorageError: One or more slots could not be written
        """
        self._repos.participants.overwrite(document.participants)
        self._repos.budget_items.overwrite(document.budget_items)
        self._repos.expenses.overwrite(document.expenses)
        self._repos.settings.replace(document.settings)

        results = self._repos.persist_all()
        failed = [key for key, ok in results.items() if not ok]
        if failed:
            raise StorageError(
                f"Backup only partly saved; failed: {', '.join(failed)}",
                key=",".join(failed),
            )

        self._announce(ChangeEventBuilder.data_imported(document.counts))
        return document.counts
