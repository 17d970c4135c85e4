"""
Tests for RecordValidator and its parsing helpers.
"""

from datetime import date
from decimal import Decimal

import pytest

from programme_tracker.models import BudgetItem, BudgetItemForm, ParticipantForm
from programme_tracker.validation import (
    RecordValidator,
    parse_amount,
    parse_date,
)


class TestParsing:
    """Tests for the amount and date parsers."""

    def test_parse_date_accepts_iso_dates(self):
        """Test a plain YYYY-MM-DD value."""
        assert parse_date("2026-02-01") == date(2026, 2, 1)

    @pytest.mark.parametrize("text", ["2026-02-01junk", "2026-02-30", "someday", ""])
    def test_parse_date_rejects_anything_else(self, text):
        """Test trailing text and impossible dates are not accepted."""
        assert parse_date(text) is None

    def test_parse_amount_handles_separators(self):
        """Test thousands separators are accepted."""
        assert parse_amount("1,500.50") == Decimal("1500.50")

    @pytest.mark.parametrize("text", ["12abc", "NaN", "Infinity"])
    def test_parse_amount_rejects_non_numbers(self, text):
        """Test text that is not a finite number."""
        assert parse_amount(text) is None


class TestLengthLimits:
    """Tests for the name and category length limits."""

    def test_long_name_is_reported(self):
        """Test a 201-character name is a too_long issue."""
        form = ParticipantForm.model_validate({
            "name": "n" * 201,
            "email": "a@example.com",
            "programme": "skills",
            "startDate": "2026-02-01",
        })
        result = RecordValidator().validate_participant(form, [])
        assert not result.is_valid
        assert result.first_error.field == "name"
        assert result.first_error.issue_type == "too_long"

    def test_long_category_skips_duplicate_check(self):
        """Test an over-long category is reported before uniqueness is looked at."""
        form = BudgetItemForm.model_validate({
            "category": "c" * 201, "amount": "10", "priority": "Low",
        })
        existing = [BudgetItem(category="Training", amount=Decimal("5"), priority="High")]
        result = RecordValidator().validate_budget_item(form, existing)
        assert not result.fields_valid
        assert [i.issue_type for i in result.issues] == ["too_long"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
