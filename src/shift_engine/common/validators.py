from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm


def require_non_empty(value: str, field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_date_range(start: date, end: date, *, field_name: str = "Date range") -> None:
    if end < start:
        raise ValidationError(f"{field_name}: end date must not be before start date")


def crosses_midnight(shift_start: str, shift_end: str) -> bool:
    """True when the end is earlier in the day than the start (e.g. 15:00-01:00)."""
    return parse_hhmm(shift_end) < parse_hhmm(shift_start)


def validate_shift_times(shift_start: str, shift_end: str, crosses: Optional[bool] = None) -> None:
    """Both ends must be ``HH:mm``; an end before the start requires ``crosses``."""

    start = parse_hhmm(shift_start)
    end = parse_hhmm(shift_end)
    start_total = start.hour * 60 + start.minute
    end_total = end.hour * 60 + end.minute

    if end_total < start_total and not crosses:
        raise ValidationError(
            "Shift end time is before start time; the shift must be marked as crossing midnight"
        )
