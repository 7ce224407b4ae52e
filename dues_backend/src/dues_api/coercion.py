from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional, Union

from .models import Amount

# Shared type for incoming due_date values: a date, datetime, or ISO8601 string
DueDateInput = Union[date, datetime, str]


def parse_due_date(value: Optional[DueDateInput]) -> Optional[datetime]:
    """
    Normalize a due_date input into a datetime.
    - If value is a string, attempt to parse via datetime.fromisoformat; if time is missing, set to 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "Invalid due_date format. Use ISO8601 date or datetime string (e.g., '2025-01-31' or '2025-01-31T13:45:00')."
                ) from e

    raise ValueError("Invalid type for due_date; expected date, datetime, or ISO8601 string.")


def parse_amount(value: Any) -> Amount:
    """
    Normalize an amount to an int or a finite float.

    Numeric strings are accepted ("69" -> 69, "12.5" -> 12.5); booleans are not.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be a number")

    if isinstance(value, str):
        s = value.strip()
        try:
            return int(s)
        except ValueError:
            try:
                value = float(s)
            except ValueError as e:
                raise ValueError("amount must be a number") from e

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("amount must be a finite number")
        return value

    raise ValueError("amount must be a number")


def require_text(field: str, value: Any) -> str:
    """Strip a label and reject anything that is not a non-empty string."""
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    s = value.strip()
    if not s:
        raise ValueError(f"{field} must not be empty")
    return s
