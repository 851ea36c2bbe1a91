from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import minutes_between
from ..core.constants import DEFAULT_DUPLICATE_SCAN_MINUTES
from ..core.enums import EventStatus
from .model import AttendanceEvent, AttendanceSession

logger = logging.getLogger(__name__)

_OPENING = {EventStatus.CHECK_IN, EventStatus.OVERTIME_IN}
_CLOSING = {EventStatus.CHECK_OUT, EventStatus.OVERTIME_OUT}
_IGNORED = {EventStatus.BREAK_IN, EventStatus.BREAK_OUT}


def pair_events(
    events: Iterable[AttendanceEvent],
    business_day_for: Callable[[AttendanceEvent], date],
    *,
    duplicate_window_minutes: int = DEFAULT_DUPLICATE_SCAN_MINUTES,
) -> list[AttendanceSession]:
    """Pair one employee's scans into sessions.

    The most recent unmatched check-in is closed by the next check-out that
    falls on the same business day. ``unspecified`` scans toggle (devices
    that only report one kind of event). A repeated scan of the same kind
    inside the duplicate window is dropped. Unmatched trailing check-ins are
    returned as open sessions.
    """

    sessions: list[AttendanceSession] = []
    open_session: Optional[AttendanceSession] = None
    last: Optional[AttendanceEvent] = None

    for ev in sorted(events, key=lambda e: e.timestamp):
        if ev.status in _IGNORED:
            continue

        if (
            last is not None
            and ev.status == last.status
            and minutes_between(last.timestamp, ev.timestamp) < duplicate_window_minutes
        ):
            logger.debug("Ignoring duplicate scan employee=%s at %s", ev.employee_id, ev.timestamp)
            continue
        last = ev

        day = business_day_for(ev)
        if ev.status in _OPENING:
            closing = False
        elif ev.status in _CLOSING:
            closing = True
        else:
            closing = open_session is not None and open_session.business_day == day

        if not closing:
            if open_session is not None:
                sessions.append(open_session)
            open_session = AttendanceSession(employee_id=ev.employee_id, business_day=day, check_in=ev.timestamp)
            continue

        if open_session is not None and open_session.business_day == day:
            sessions.append(
                AttendanceSession(
                    employee_id=open_session.employee_id,
                    business_day=day,
                    check_in=open_session.check_in,
                    check_out=ev.timestamp,
                )
            )
            open_session = None
            continue

        if open_session is not None:
            sessions.append(open_session)
            open_session = None
        logger.debug("Unmatched check-out employee=%s at %s", ev.employee_id, ev.timestamp)

    if open_session is not None:
        sessions.append(open_session)

    sessions.sort(key=lambda s: s.check_in)
    return sessions
