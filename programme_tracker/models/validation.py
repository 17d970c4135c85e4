"""
Validation Result Models

IMPORTANT: Validation NEVER silently fixes input.
Every problem found is reported as an issue; the mutation layer
refuses to write anything while error-level issues exist.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from programme_tracker.models.records import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form.

    Stage 1: Field validation (presence, format)
    Stage 2: Collection validation (uniqueness against stored records)
    """

    entity_type: str = Field(
        ...,
        description="Entity the form would create (participant, budget_item, expense)"
    )
    validated_at: datetime = Field(default_factory=utc_now)

    fields_valid: bool = Field(
        ...,
        description="Did field validation pass?"
    )
    collection_valid: bool = Field(
        ...,
        description="Did the uniqueness checks pass?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.fields_valid and self.collection_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue
        return None
