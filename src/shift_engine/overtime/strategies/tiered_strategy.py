from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ...common.datetime_utils import LocalClock, minutes_between
from ...core.constants import (
    OT_BLOCK_CREDIT,
    OT_BLOCK_MINUTES,
    OT_LINEAR_FROM,
    OT_LINEAR_RATE,
    OT_MIN_FULL_HOUR,
    OT_MIN_HALF_HOUR,
)
from ...shifts.model import ResolvedShift
from .base import OvertimeStrategy

_RATE = Decimal(OT_LINEAR_RATE)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _short_tier(extra: int) -> int:
    if extra < OT_MIN_HALF_HOUR:
        return 0
    if extra < OT_MIN_FULL_HOUR:
        return 30
    return 60


def _linear_tier(extra: int) -> int:
    return max(OT_LINEAR_FROM, round_half_up(Decimal(extra) * _RATE))


def tiered_overtime(extra_work: int) -> int:
    """OT credit for ``extra_work`` minutes beyond the expected shift.

    < 25 -> 0, [25, 55) -> 30, [55, 60) -> 60, [60, 480] -> 81.25% (at least
    60). Beyond 480 every full 480-minute block credits 390 and the
    remainder goes through the same rules.
    """
    if extra_work <= 0:
        return 0
    if extra_work < OT_LINEAR_FROM:
        return _short_tier(extra_work)
    if extra_work <= OT_BLOCK_MINUTES:
        return _linear_tier(extra_work)

    blocks, remainder = divmod(extra_work, OT_BLOCK_MINUTES)
    credit = blocks * OT_BLOCK_CREDIT
    if remainder >= OT_LINEAR_FROM:
        return credit + _linear_tier(remainder)
    return credit + _short_tier(remainder)


class TieredStrategy(OvertimeStrategy):
    """Regular working day: extra work measured against the expected shift window."""

    def overtime_minutes(self, *, in_time: datetime, out_time: datetime, shift: ResolvedShift, clock: LocalClock) -> int:
        expected_start, expected_end = clock.shift_window(
            shift.shift_date, shift.shift_start, shift.shift_end, shift.crosses_midnight
        )

        late_minutes = minutes_between(expected_start, clock.to_local(in_time))
        extra_out_minutes = minutes_between(expected_end, clock.to_local(out_time))

        # Early arrival (negative lateness) adds to extra work.
        return tiered_overtime(extra_out_minutes - late_minutes)
