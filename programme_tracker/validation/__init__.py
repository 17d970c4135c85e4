"""Form validation package."""

from programme_tracker.validation.validator import (
    EMAIL_PATTERN,
    RecordValidator,
    is_valid_email,
    parse_amount,
    parse_date,
    resolve_programme,
)

__all__ = [
    "EMAIL_PATTERN",
    "RecordValidator",
    "is_valid_email",
    "parse_amount",
    "parse_date",
    "resolve_programme",
]
