from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..shifts.model import ResolvedShift
from .strategies.base import OvertimeStrategy
from .strategies.no_overtime_strategy import NoOvertimeStrategy
from .strategies.off_day_strategy import OffDayStrategy
from .strategies.tiered_strategy import TieredStrategy


@dataclass
class OvertimeStrategyFactory:
    """Factory Pattern: choose the OT rule for a resolved shift."""

    def for_session(
        self,
        *,
        in_time: Optional[datetime],
        out_time: Optional[datetime],
        shift: Optional[ResolvedShift],
    ) -> OvertimeStrategy:
        if in_time is None or out_time is None or shift is None:
            return NoOvertimeStrategy()

        if shift.is_off_day_overtime:
            return OffDayStrategy()

        if not shift.has_times:
            return NoOvertimeStrategy()
        return TieredStrategy()
