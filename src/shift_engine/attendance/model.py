from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EventStatus, Punctuality, VerifyMode


@dataclass(frozen=True)
class AttendanceEvent:
    """One raw scan from the device feed. Append-only."""

    event_id: int
    employee_id: str
    device_user_id: str
    device_id: str
    timestamp: datetime
    verify_mode: VerifyMode
    status: EventStatus
    source_ip: str
    received_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceSession:
    """A check-in paired with its check-out (or still open) on one business day."""

    employee_id: str
    business_day: date
    check_in: datetime
    check_out: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None


@dataclass(frozen=True)
class SessionReportRow:
    """Read-model: a session with its OT, ready for the upstream report layer."""

    employee_id: str
    business_day: date
    check_in: datetime
    check_out: Optional[datetime]
    ot_minutes: int
    source: Optional[str]
    late_minutes: int = 0
    flag: Optional[Punctuality] = None
    unscheduled: bool = False
