from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation


def validate_percent(value: object) -> Decimal:
    """Validate a tax/discount percentage. Empty input counts as 0.

    Raises ValueError for non-numeric or negative values.
    """
    text = str(value).strip().rstrip("%").strip()
    if not text:
        return Decimal("0")
    try:
        d = Decimal(text)
        if not d.is_finite():
            raise InvalidOperation
    except InvalidOperation:
        raise ValueError(f"Invalid percentage: '{value}'") from None
    if d < 0:
        raise ValueError("Percentage cannot be negative")
    return d


def validate_date(value: str) -> str:
    """Validate an ISO date string (YYYY-MM-DD).

    Returns the value unchanged if valid.
    Raises ValueError for invalid dates.
    """
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date: '{value}'. Use YYYY-MM-DD.") from None
    return value
