from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import NotFoundError, ValidationError
from ..shifts.model import ResolvedShift
from ..shifts.resolver import ShiftResolver
from .calculator import OvertimeCalculator
from .formatting import format_ot, ot_in_hours

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeResult:
    minutes: int
    resolved_shift: ResolvedShift
    business_day: date

    def to_dict(self) -> dict:
        return {
            "minutes": self.minutes,
            "formatted": format_ot(self.minutes),
            "hours": str(ot_in_hours(self.minutes)),
            "business_day": self.business_day.strftime("%Y-%m-%d"),
            "resolved_shift": self.resolved_shift.to_dict(),
        }


class OvertimeService:
    def __init__(self, resolver: ShiftResolver, calculator: OvertimeCalculator):
        self._resolver = resolver
        self._calculator = calculator

    def compute_overtime(
        self,
        employee_id: str,
        in_time: datetime,
        out_time: Optional[datetime] = None,
    ) -> OvertimeResult:
        """Resolve the shift the check-in belongs to and compute OT for the pair.

        Raises NotFoundError when the business day is unscheduled.
        """
        if in_time is None:
            raise ValidationError("Check-in time is required")

        shift, business_day = self._resolver.resolve_for_timestamp(employee_id, in_time)
        if shift is None:
            raise NotFoundError(f"No shift scheduled for employee {employee_id} on {business_day:%Y-%m-%d}")

        minutes = self._calculator.calculate(in_time, out_time, shift)
        logger.debug(
            "OT employee=%s business_day=%s source=%s minutes=%d",
            employee_id,
            business_day,
            shift.source.value,
            minutes,
        )
        return OvertimeResult(minutes=minutes, resolved_shift=shift, business_day=business_day)
