from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class Leave:
    """Employee leave over an inclusive date range."""

    leave_id: int
    employee_id: str
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.status == LeaveStatus.APPROVED and self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Holiday:
    """Company-wide holiday over an inclusive date range."""

    holiday_id: int
    name: str
    date_from: date
    date_to: date

    def covers(self, day: date) -> bool:
        return self.date_from <= day <= self.date_to
