from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.enums import OverrideType, ShiftSource, ShiftType


@dataclass(frozen=True)
class ShiftTemplate:
    """Recurring shift assignment for one employee over an inclusive date range."""

    template_id: int
    employee_id: str
    effective_from: date
    effective_to: date
    shift_type: ShiftType
    shift_start: str
    shift_end: str
    crosses_midnight: bool = False
    active: bool = True
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    updated_by: Optional[str] = None
    change_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.active and self.effective_from <= day <= self.effective_to


@dataclass(frozen=True)
class ShiftOverride:
    """Single-day exception; ``replace`` carries its own shift fields."""

    override_id: int
    employee_id: str
    shift_date: date
    override_type: OverrideType
    shift_type: Optional[ShiftType] = None
    shift_start: Optional[str] = None
    shift_end: Optional[str] = None
    crosses_midnight: bool = False
    updated_by: Optional[str] = None
    change_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResolvedShift:
    """Authoritative shift for (employee, shift_date).

    ``source`` is the variant tag. Off-day rows (holiday, leave, cancel,
    off_day) may have no shift times at all. ``resolved_at`` is bookkeeping
    and is not part of equality, so a recomputation compares equal to the
    cached row when nothing upstream changed.
    """

    employee_id: str
    shift_date: date
    source: ShiftSource
    shift_type: Optional[ShiftType] = None
    shift_start: Optional[str] = None
    shift_end: Optional[str] = None
    crosses_midnight: bool = False
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    is_off_day_overtime: bool = False
    template_id: Optional[int] = None
    override_id: Optional[int] = None
    leave_id: Optional[int] = None
    holiday_id: Optional[int] = None
    resolved_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def has_times(self) -> bool:
        return bool(self.shift_start and self.shift_end)

    @property
    def start_hour(self) -> Optional[int]:
        if not self.shift_start:
            return None
        return int(self.shift_start.split(":")[0])

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "shift_date": self.shift_date.strftime("%Y-%m-%d"),
            "source": self.source.value,
            "shift_type": self.shift_type.value if self.shift_type else None,
            "shift_start": self.shift_start,
            "shift_end": self.shift_end,
            "crosses_midnight": self.crosses_midnight,
            "grace_period_minutes": self.grace_period_minutes,
            "is_off_day_overtime": self.is_off_day_overtime,
            "template_id": self.template_id,
            "override_id": self.override_id,
            "leave_id": self.leave_id,
            "holiday_id": self.holiday_id,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
        }
