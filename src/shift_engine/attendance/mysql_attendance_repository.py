from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventStatus, VerifyMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent
from .repository import AttendanceEventRepository, DeviceUserRepository


class MySQLAttendanceEventRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        employee_id: str,
        device_user_id: str,
        device_id: str,
        timestamp: datetime,
        verify_mode: VerifyMode,
        status: EventStatus,
        source_ip: str,
        received_at: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(
                    employee_id, device_user_id, device_id, timestamp, verify_mode, status, source_ip, received_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    device_user_id,
                    device_id,
                    timestamp,
                    verify_mode.value,
                    status.value,
                    source_ip,
                    received_at,
                ),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, *, employee_id: str, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, employee_id, device_user_id, device_id, timestamp,
                       verify_mode, status, source_ip, received_at
                FROM attendance_events
                WHERE employee_id=%s AND timestamp>=%s AND timestamp<%s
                ORDER BY timestamp ASC, event_id ASC
                """,
                (employee_id, start, end),
            )
            rows = fetchall(cur)
            return [
                AttendanceEvent(
                    event_id=int(r["event_id"]),
                    employee_id=str(r["employee_id"]),
                    device_user_id=str(r["device_user_id"]),
                    device_id=r["device_id"],
                    timestamp=r["timestamp"],
                    verify_mode=VerifyMode(r["verify_mode"]),
                    status=EventStatus(r["status"]),
                    source_ip=r["source_ip"],
                    received_at=r.get("received_at"),
                )
                for r in rows
            ]


class MySQLDeviceUserRepository(DeviceUserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def employee_for_device_user(self, device_user_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM device_users WHERE device_user_id=%s", (device_user_id,))
            r = fetchone(cur)
            return str(r["employee_id"]) if r else None
