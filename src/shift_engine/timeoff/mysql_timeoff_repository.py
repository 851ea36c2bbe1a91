from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchone
from .model import Holiday, Leave
from .repository import HolidayRepository, LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_approved_covering(self, *, employee_id: str, day: date) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_id, employee_id, start_date, end_date, status, reason
                FROM leaves
                WHERE employee_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                ORDER BY leave_id ASC
                LIMIT 1
                """,
                (employee_id, LeaveStatus.APPROVED.value, day, day),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Leave(
                leave_id=int(r["leave_id"]),
                employee_id=str(r["employee_id"]),
                start_date=as_date(r["start_date"]),
                end_date=as_date(r["end_date"]),
                status=LeaveStatus(r["status"]),
                reason=r.get("reason"),
            )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_covering(self, day: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, name, date_from, date_to
                FROM holidays
                WHERE date_from<=%s AND date_to>=%s
                ORDER BY holiday_id ASC
                LIMIT 1
                """,
                (day, day),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Holiday(
                holiday_id=int(r["holiday_id"]),
                name=r["name"],
                date_from=as_date(r["date_from"]),
                date_to=as_date(r["date_to"]),
            )
