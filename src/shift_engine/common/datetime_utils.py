from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError

_ONE_MINUTE = timedelta(minutes=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: str) -> time:
    """Parse a strict ``HH:mm`` time-of-day string."""
    v = (value or "").strip()
    parts = v.split(":")
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValidationError(f"Invalid time (HH:mm): {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time (HH:mm): {value!r}")
    return time(hour=hour, minute=minute)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, truncated toward zero."""
    delta = end - start
    if delta < timedelta(0):
        return -((-delta) // _ONE_MINUTE)
    return delta // _ONE_MINUTE


def iter_days(start: date, end: date):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


@dataclass(frozen=True)
class LocalClock:
    """Day/time arithmetic in the organization's fixed timezone.

    Built once from configuration and passed to the resolver, calculator and
    ingest services. Naive datetimes are interpreted as organization-local
    (that is how they are stored in the database).
    """

    timezone: str = DEFAULT_TIMEZONE
    _tz: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            tz = ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown timezone: {self.timezone!r}")
        object.__setattr__(self, "_tz", tz)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        """Current local time.

        Note: Wrapped so tests can patch/mocked easier.
        """
        return datetime.now(tz=self._tz)

    def to_local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)

    def to_naive_local(self, value: datetime) -> datetime:
        """Local wall-clock time without tzinfo (storage format)."""
        return self.to_local(value).replace(tzinfo=None)

    def local_date(self, value: datetime) -> date:
        return self.to_local(value).date()

    def at(self, day: date, hhmm: str) -> datetime:
        return datetime.combine(day, parse_hhmm(hhmm), tzinfo=self._tz)

    def shift_window(self, day: date, shift_start: str, shift_end: str, crosses_midnight: bool) -> Tuple[datetime, datetime]:
        """Expected (start, end) of a shift attributed to ``day``.

        A crossing shift ends on the next calendar day, e.g. 15:00-01:00
        ends at ``day + 1`` 01:00.
        """
        expected_start = self.at(day, shift_start)
        expected_end = self.at(day, shift_end)
        if crosses_midnight:
            expected_end = self.at(day + timedelta(days=1), shift_end)
        return expected_start, expected_end

    def business_day_of(
        self,
        timestamp: datetime,
        shift_start_hour: Optional[int] = None,
        crosses_midnight: bool = False,
    ) -> date:
        """Calendar date the event is attributed to.

        Events before the start hour of a midnight-crossing shift belong to
        the previous day's shift. Without shift context it is simply the
        local calendar date.
        """
        local = self.to_local(timestamp)
        if shift_start_hour is not None and crosses_midnight and local.hour < shift_start_hour:
            return local.date() - timedelta(days=1)
        return local.date()


def parse_iso_datetime(value) -> datetime:
    """Parse an ISO-8601 timestamp (with or without offset)."""
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timestamp (ISO-8601): {value!r}")
