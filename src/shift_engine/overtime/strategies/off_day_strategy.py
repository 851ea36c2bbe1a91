from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import LocalClock, minutes_between
from ...shifts.model import ResolvedShift
from .base import OvertimeStrategy


class OffDayStrategy(OvertimeStrategy):
    """Holiday / leave / cancelled day: the whole worked duration is overtime."""

    def overtime_minutes(self, *, in_time: datetime, out_time: datetime, shift: ResolvedShift, clock: LocalClock) -> int:
        worked = minutes_between(clock.to_local(in_time), clock.to_local(out_time))
        return max(worked, 0)
