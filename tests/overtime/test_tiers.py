from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from shift_engine.common.datetime_utils import LocalClock
from shift_engine.core.enums import ShiftSource, ShiftType
from shift_engine.overtime.calculator import OvertimeCalculator
from shift_engine.overtime.factory import OvertimeStrategyFactory
from shift_engine.overtime.formatting import format_ot, ot_in_hours
from shift_engine.overtime.strategies.no_overtime_strategy import NoOvertimeStrategy
from shift_engine.overtime.strategies.off_day_strategy import OffDayStrategy
from shift_engine.overtime.strategies.tiered_strategy import TieredStrategy, tiered_overtime
from shift_engine.shifts.model import ResolvedShift

DAY = date(2026, 2, 1)


def _shift(start="07:00", end="15:00", crosses=False, day=DAY):
    return ResolvedShift(
        employee_id="E001",
        shift_date=day,
        source=ShiftSource.TEMPLATE,
        shift_type=ShiftType.CUSTOM,
        shift_start=start,
        shift_end=end,
        crosses_midnight=crosses,
    )


def _holiday(day=DAY):
    return ResolvedShift(employee_id="E001", shift_date=day, source=ShiftSource.HOLIDAY, is_off_day_overtime=True)


@pytest.fixture
def calculator():
    return OvertimeCalculator(LocalClock("Asia/Dhaka"))


@pytest.mark.parametrize(
    "extra, expected",
    [
        (-30, 0),
        (0, 0),
        (20, 0),
        (24, 0),
        (25, 30),
        (40, 30),
        (54, 30),
        (55, 60),
        (58, 60),
        (60, 60),
        (120, 98),
        (480, 390),
        (500, 390),
        (540, 450),
        (1000, 810),
    ],
)
def test_tiered_overtime(extra, expected):
    assert tiered_overtime(extra) == expected


def test_factory_picks_strategy():
    factory = OvertimeStrategyFactory()
    t = datetime(2026, 2, 1, 7, 0)

    assert isinstance(factory.for_session(in_time=t, out_time=t, shift=_shift()), TieredStrategy)
    assert isinstance(factory.for_session(in_time=t, out_time=t, shift=_holiday()), OffDayStrategy)
    assert isinstance(factory.for_session(in_time=t, out_time=None, shift=_shift()), NoOvertimeStrategy)


@pytest.mark.parametrize(
    "in_time, out_time, expected",
    [
        (datetime(2026, 2, 1, 7, 0), datetime(2026, 2, 1, 17, 0), 98),
        (datetime(2026, 2, 1, 7, 0), datetime(2026, 2, 1, 15, 40), 30),
        (datetime(2026, 2, 1, 7, 0), datetime(2026, 2, 1, 15, 58), 60),
        (datetime(2026, 2, 1, 7, 10), datetime(2026, 2, 1, 16, 10), 60),
        (datetime(2026, 2, 1, 6, 40), datetime(2026, 2, 1, 15, 0), 0),
        (datetime(2026, 2, 1, 7, 0), datetime(2026, 2, 1, 14, 0), 0),
    ],
)
def test_regular_day_overtime(calculator, in_time, out_time, expected):
    assert calculator.calculate(in_time, out_time, _shift()) == expected


def test_crossing_shift_ends_next_day(calculator):
    shift = _shift("15:00", "01:00", crosses=True, day=date(2026, 2, 10))

    minutes = calculator.calculate(datetime(2026, 2, 10, 15, 0), datetime(2026, 2, 11, 3, 0), shift)

    assert minutes == 98


def test_holiday_work_is_fully_overtime(calculator):
    assert calculator.calculate(datetime(2026, 2, 1, 9, 0), datetime(2026, 2, 1, 13, 0), _holiday()) == 240


def test_missing_check_out_gives_zero(calculator):
    assert calculator.calculate(datetime(2026, 2, 1, 7, 0), None, _shift()) == 0
    assert calculator.calculate(None, datetime(2026, 2, 1, 17, 0), _holiday()) == 0


def test_aware_timestamps_are_converted_to_local_time(calculator):
    utc = ZoneInfo("UTC")

    # 01:00Z / 11:00Z are 07:00 / 17:00 in Dhaka.
    minutes = calculator.calculate(datetime(2026, 2, 1, 1, 0, tzinfo=utc), datetime(2026, 2, 1, 11, 0, tzinfo=utc), _shift())

    assert minutes == 98


def test_formatting():
    assert format_ot(90) == "1:30"
    assert format_ot(0) == "0:00"
    assert format_ot(605) == "10:05"
    assert ot_in_hours(90) == Decimal("1.50")
    assert ot_in_hours(98) == Decimal("1.63")
