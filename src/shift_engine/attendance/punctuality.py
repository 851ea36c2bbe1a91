from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import LocalClock, minutes_between
from ..core.constants import EXTREME_DELAY_MINUTES
from ..core.enums import Punctuality, ShiftSource
from ..shifts.model import ResolvedShift


@dataclass(frozen=True)
class PunctualityDecision:
    late_minutes: int
    flag: Optional[Punctuality] = None


def assess_punctuality(in_time: datetime, shift: Optional[ResolvedShift], clock: LocalClock) -> PunctualityDecision:
    """Late minutes and report flag for a check-in.

    The grace period only decides between P and D; it never changes OT.
    """
    if shift is None:
        return PunctualityDecision(late_minutes=0)

    if shift.source == ShiftSource.HOLIDAY:
        return PunctualityDecision(late_minutes=0, flag=Punctuality.HOLIDAY)
    if shift.source == ShiftSource.LEAVE:
        return PunctualityDecision(late_minutes=0, flag=Punctuality.LEAVE)
    if shift.is_off_day_overtime or not shift.has_times:
        return PunctualityDecision(late_minutes=0, flag=Punctuality.PRESENT)

    expected_start = clock.at(shift.shift_date, shift.shift_start)
    late = max(minutes_between(expected_start, clock.to_local(in_time)), 0)

    if late > EXTREME_DELAY_MINUTES:
        return PunctualityDecision(late_minutes=late, flag=Punctuality.EXTREME_DELAY)
    if late > shift.grace_period_minutes:
        return PunctualityDecision(late_minutes=late, flag=Punctuality.DELAYED)
    return PunctualityDecision(late_minutes=late, flag=Punctuality.PRESENT)
