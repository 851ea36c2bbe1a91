from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import LocalClock
from ..shifts.model import ResolvedShift
from .factory import OvertimeStrategyFactory


class OvertimeCalculator:
    """Pure OT computation for one attendance pair against a resolved shift.

    Never raises for missing inputs: an open session (no check-out) is a
    normal state and yields 0.
    """

    def __init__(self, clock: LocalClock, *, strategy_factory: OvertimeStrategyFactory | None = None):
        self._clock = clock
        self._factory = strategy_factory or OvertimeStrategyFactory()

    def calculate(
        self,
        in_time: Optional[datetime],
        out_time: Optional[datetime],
        shift: Optional[ResolvedShift],
    ) -> int:
        strategy = self._factory.for_session(in_time=in_time, out_time=out_time, shift=shift)
        minutes = strategy.overtime_minutes(in_time=in_time, out_time=out_time, shift=shift, clock=self._clock)
        return max(int(minutes), 0)
