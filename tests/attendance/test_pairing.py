from __future__ import annotations

from datetime import datetime

from shift_engine.attendance.model import AttendanceEvent
from shift_engine.attendance.pairing import pair_events
from shift_engine.core.enums import EventStatus, VerifyMode


def _ev(ts: datetime, status: str, event_id: int = 0) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=event_id,
        employee_id="E001",
        device_user_id="42",
        device_id="DEV",
        timestamp=ts,
        verify_mode=VerifyMode.FINGERPRINT,
        status=EventStatus(status),
        source_ip="127.0.0.1",
    )


def _calendar_day(ev: AttendanceEvent):
    return ev.timestamp.date()


def test_check_in_and_out_make_one_session():
    sessions = pair_events(
        [_ev(datetime(2026, 2, 1, 17, 0), "check-out"), _ev(datetime(2026, 2, 1, 7, 0), "check-in")],
        _calendar_day,
    )

    assert len(sessions) == 1
    assert sessions[0].check_in == datetime(2026, 2, 1, 7, 0)
    assert sessions[0].check_out == datetime(2026, 2, 1, 17, 0)
    assert not sessions[0].is_open


def test_duplicate_scan_within_window_is_dropped():
    sessions = pair_events(
        [
            _ev(datetime(2026, 2, 1, 7, 0), "check-in"),
            _ev(datetime(2026, 2, 1, 7, 1), "check-in"),
            _ev(datetime(2026, 2, 1, 17, 0), "check-out"),
        ],
        _calendar_day,
    )

    assert len(sessions) == 1
    assert sessions[0].check_in == datetime(2026, 2, 1, 7, 0)


def test_newer_check_in_replaces_unmatched_one():
    sessions = pair_events(
        [
            _ev(datetime(2026, 2, 1, 7, 0), "check-in"),
            _ev(datetime(2026, 2, 1, 9, 0), "check-in"),
            _ev(datetime(2026, 2, 1, 17, 0), "check-out"),
        ],
        _calendar_day,
    )

    assert [s.is_open for s in sessions] == [True, False]
    assert sessions[1].check_in == datetime(2026, 2, 1, 9, 0)


def test_unspecified_scans_toggle():
    sessions = pair_events(
        [
            _ev(datetime(2026, 2, 1, 7, 0), "unspecified"),
            _ev(datetime(2026, 2, 1, 15, 0), "unspecified"),
            _ev(datetime(2026, 2, 1, 18, 0), "unspecified"),
        ],
        _calendar_day,
    )

    assert len(sessions) == 2
    assert sessions[0].check_out == datetime(2026, 2, 1, 15, 0)
    assert sessions[1].check_in == datetime(2026, 2, 1, 18, 0)
    assert sessions[1].is_open


def test_break_scans_are_ignored():
    sessions = pair_events(
        [
            _ev(datetime(2026, 2, 1, 7, 0), "check-in"),
            _ev(datetime(2026, 2, 1, 12, 0), "break-out"),
            _ev(datetime(2026, 2, 1, 12, 30), "break-in"),
            _ev(datetime(2026, 2, 1, 15, 0), "check-out"),
        ],
        _calendar_day,
    )

    assert len(sessions) == 1
    assert sessions[0].check_out == datetime(2026, 2, 1, 15, 0)


def test_check_out_on_another_business_day_does_not_close():
    sessions = pair_events(
        [_ev(datetime(2026, 2, 1, 7, 0), "check-in"), _ev(datetime(2026, 2, 2, 8, 0), "check-out")],
        _calendar_day,
    )

    assert len(sessions) == 1
    assert sessions[0].is_open


def test_overtime_scans_pair_like_regular_ones():
    sessions = pair_events(
        [_ev(datetime(2026, 2, 1, 16, 0), "overtime-in"), _ev(datetime(2026, 2, 1, 19, 0), "overtime-out")],
        _calendar_day,
    )

    assert sessions[0].check_out == datetime(2026, 2, 1, 19, 0)


def test_no_events_no_sessions():
    assert pair_events([], _calendar_day) == []
