from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import LocalClock
from ...shifts.model import ResolvedShift
from .base import OvertimeStrategy


class NoOvertimeStrategy(OvertimeStrategy):
    """Open session or a shift without times: nothing to measure yet."""

    def overtime_minutes(self, *, in_time: datetime, out_time: datetime, shift: ResolvedShift, clock: LocalClock) -> int:
        return 0
