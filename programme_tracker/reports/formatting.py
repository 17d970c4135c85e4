"""Display formatting for amounts and dates."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from programme_tracker.models.stats import NOT_AVAILABLE


def format_currency(amount: Union[Decimal, int, float], symbol: str = "R") -> str:
    """R1 234.50 style: two decimals, spaces between thousands."""
    grouped = f"{Decimal(str(amount)):,.2f}".replace(",", " ")
    return f"{symbol}{grouped}"


def format_date(value: Optional[Union[date, datetime, str]]) -> str:
    """Oct 18, 2026 style; N/A when there is no date."""
    if not value:
        return NOT_AVAILABLE
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return NOT_AVAILABLE
    return f"{value:%b} {value.day}, {value.year}"
