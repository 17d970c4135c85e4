"""
Two-Stage Form Validation

STAGE 1 - FIELD VALIDATION:
- Required field presence
- Format validation (email, dates, amounts)
- This catches incomplete or malformed form input

STAGE 2 - COLLECTION VALIDATION:
- Email uniqueness among participants
- Case-insensitive category uniqueness among budget items
- This needs the current collection, so it runs against a repository snapshot

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes input.
It reports every issue; the caller decides what to do.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from programme_tracker.models.forms import (
    BudgetItemForm,
    ExpenseForm,
    ParticipantForm,
)
from programme_tracker.models.records import (
    MAX_TEXT_LENGTH,
    BudgetItem,
    Participant,
    Programme,
)
from programme_tracker.models.validation import ValidationIssue, ValidationResult


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """Decimal value of a form amount, or None if it is not a finite number."""
    if text is None:
        return None
    try:
        value = Decimal(text.replace(",", ""))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_date(text: Optional[str]) -> Optional[date]:
    """Date from an ISO (YYYY-MM-DD) form value, or None. The whole text must parse."""
    if text is None:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def resolve_programme(form: ParticipantForm) -> Optional[str]:
    """
    Programme to store for a participant form.

    The "custom" choice is replaced by the custom programme name;
    None means no usable programme was given.
    """
    if form.programme == Programme.CUSTOM.value:
        return form.custom_programme
    return form.programme


def _missing(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{label} is required",
        suggested_fix="Please fill all required fields",
    )


def _too_long(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="too_long",
        message=f"{label} must be at most {MAX_TEXT_LENGTH} characters",
    )


class RecordValidator:
    """
    Validates form input before anything is written.

    Each validate_* method takes the form and a snapshot of the
    collection it would be added to.
    """

    def _result(
        self,
        entity_type: str,
        field_issues: list[ValidationIssue],
        collection_issues: list[ValidationIssue],
    ) -> ValidationResult:
        fields_valid = not any(i.severity == "error" for i in field_issues)
        collection_valid = not any(i.severity == "error" for i in collection_issues)
        return ValidationResult(
            entity_type=entity_type,
            fields_valid=fields_valid,
            collection_valid=collection_valid,
            issues=field_issues + collection_issues,
        )

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def _validate_participant_fields(self, form: ParticipantForm) -> list[ValidationIssue]:
        issues = []

        if form.programme == Programme.CUSTOM.value and not form.custom_programme:
            issues.append(ValidationIssue(
                field="custom_programme",
                issue_type="missing",
                message="Please enter a custom programme name",
            ))
        elif resolve_programme(form) is None:
            issues.append(_missing("programme", "Programme"))

        if not form.name:
            issues.append(_missing("name", "Name"))
        elif len(form.name) > MAX_TEXT_LENGTH:
            issues.append(_too_long("name", "Name"))

        if not form.email:
            issues.append(_missing("email", "Email"))
        elif not is_valid_email(form.email):
            issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message="Please enter a valid email address",
                suggested_fix="Use the form name@example.com",
            ))

        if not form.start_date:
            issues.append(_missing("start_date", "Start date"))
        elif parse_date(form.start_date) is None:
            issues.append(ValidationIssue(
                field="start_date",
                issue_type="invalid_format",
                message=f"Start date '{form.start_date}' is not a valid date",
                suggested_fix="Use the format YYYY-MM-DD",
            ))

        return issues

    def validate_participant(
        self,
        form: ParticipantForm,
        existing: list[Participant],
    ) -> ValidationResult:
        field_issues = self._validate_participant_fields(form)
        collection_issues = []

        if not field_issues:
            if any(p.email == form.email for p in existing):
                collection_issues.append(ValidationIssue(
                    field="email",
                    issue_type="duplicate",
                    message="A participant with this email already exists",
                ))

        return self._result("participant", field_issues, collection_issues)

    # ------------------------------------------------------------------
    # Budget items
    # ------------------------------------------------------------------

    def _validate_amount(self, text: Optional[str]) -> list[ValidationIssue]:
        amount = parse_amount(text)
        if amount is None:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{text}' is not a number",
            )]
        if amount < 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative",
            )]
        return []

    def validate_budget_item(
        self,
        form: BudgetItemForm,
        existing: list[BudgetItem],
    ) -> ValidationResult:
        field_issues = []

        if not form.category:
            field_issues.append(_missing("category", "Category"))
        elif len(form.category) > MAX_TEXT_LENGTH:
            field_issues.append(_too_long("category", "Category"))
        if not form.amount:
            field_issues.append(_missing("amount", "Amount"))
        else:
            field_issues.extend(self._validate_amount(form.amount))
        if not form.priority:
            field_issues.append(_missing("priority", "Priority"))

        collection_issues = []
        if not field_issues:
            wanted = form.category.casefold()
            if any(item.category.casefold() == wanted for item in existing):
                collection_issues.append(ValidationIssue(
                    field="category",
                    issue_type="duplicate",
                    message="A budget item with this category already exists",
                ))

        return self._result("budget_item", field_issues, collection_issues)

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def validate_expense(self, form: ExpenseForm) -> ValidationResult:
        field_issues = []

        if not form.category:
            field_issues.append(_missing("category", "Category"))
        elif len(form.category) > MAX_TEXT_LENGTH:
            field_issues.append(_too_long("category", "Category"))
        if not form.amount:
            field_issues.append(_missing("amount", "Amount"))
        else:
            field_issues.extend(self._validate_amount(form.amount))
        if not form.expense_date:
            field_issues.append(_missing("date", "Date"))
        elif parse_date(form.expense_date) is None:
            field_issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date '{form.expense_date}' is not a valid date",
                suggested_fix="Use the format YYYY-MM-DD",
            ))
        if not form.description:
            field_issues.append(_missing("description", "Description"))

        # Expense categories are deliberately not checked against the budget
        return self._result("expense", field_issues, [])

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One-line summary suitable for a notification."""
        if result.is_valid:
            return "All checks passed"
        missing = [i for i in result.issues if i.issue_type == "missing"]
        if len(missing) > 1:
            return "Please fill all required fields"
        first = result.first_error
        return first.message if first else "Please check the form"
