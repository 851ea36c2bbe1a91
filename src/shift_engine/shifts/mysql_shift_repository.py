from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import OverrideType, ShiftSource, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, hhmm_or_none
from .model import ResolvedShift, ShiftOverride, ShiftTemplate
from .repository import ShiftOverrideRepository, ShiftResolvedRepository, ShiftTemplateRepository

_TEMPLATE_COLUMNS = """
    template_id, employee_id, effective_from, effective_to, shift_type,
    shift_start, shift_end, crosses_midnight, active, grace_period_minutes,
    updated_by, change_reason, created_at, updated_at
"""

_OVERRIDE_COLUMNS = """
    override_id, employee_id, shift_date, override_type, shift_type,
    shift_start, shift_end, crosses_midnight, updated_by, change_reason,
    created_at, updated_at
"""


def _row_to_template(r: Dict[str, Any]) -> ShiftTemplate:
    return ShiftTemplate(
        template_id=int(r["template_id"]),
        employee_id=str(r["employee_id"]),
        effective_from=as_date(r["effective_from"]),
        effective_to=as_date(r["effective_to"]),
        shift_type=ShiftType(r["shift_type"]),
        shift_start=hhmm_or_none(r["shift_start"]),
        shift_end=hhmm_or_none(r["shift_end"]),
        crosses_midnight=bool(r["crosses_midnight"]),
        active=bool(r["active"]),
        grace_period_minutes=int(r["grace_period_minutes"]),
        updated_by=r.get("updated_by"),
        change_reason=r.get("change_reason"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_override(r: Dict[str, Any]) -> ShiftOverride:
    return ShiftOverride(
        override_id=int(r["override_id"]),
        employee_id=str(r["employee_id"]),
        shift_date=as_date(r["shift_date"]),
        override_type=OverrideType(r["override_type"]),
        shift_type=ShiftType(r["shift_type"]) if r.get("shift_type") else None,
        shift_start=hhmm_or_none(r.get("shift_start")),
        shift_end=hhmm_or_none(r.get("shift_end")),
        crosses_midnight=bool(r["crosses_midnight"]),
        updated_by=r.get("updated_by"),
        change_reason=r.get("change_reason"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_resolved(r: Dict[str, Any]) -> ResolvedShift:
    def _opt_int(key: str) -> Optional[int]:
        return int(r[key]) if r.get(key) is not None else None

    return ResolvedShift(
        employee_id=str(r["employee_id"]),
        shift_date=as_date(r["shift_date"]),
        source=ShiftSource(r["source"]),
        shift_type=ShiftType(r["shift_type"]) if r.get("shift_type") else None,
        shift_start=hhmm_or_none(r.get("shift_start")),
        shift_end=hhmm_or_none(r.get("shift_end")),
        crosses_midnight=bool(r["crosses_midnight"]),
        grace_period_minutes=int(r["grace_period_minutes"]),
        is_off_day_overtime=bool(r["is_off_day_overtime"]),
        template_id=_opt_int("template_id"),
        override_id=_opt_int("override_id"),
        leave_id=_opt_int("leave_id"),
        holiday_id=_opt_int("holiday_id"),
        resolved_at=r.get("resolved_at"),
    )


class MySQLShiftTemplateRepository(ShiftTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEMPLATE_COLUMNS} FROM shift_templates WHERE template_id=%s", (int(template_id),))
            r = fetchone(cur)
            return _row_to_template(r) if r else None

    def list_active_covering(self, *, employee_id: str, day: date) -> Sequence[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TEMPLATE_COLUMNS}
                FROM shift_templates
                WHERE employee_id=%s AND active=1 AND effective_from<=%s AND effective_to>=%s
                ORDER BY updated_at DESC, created_at DESC, template_id DESC
                """,
                (employee_id, day, day),
            )
            return [_row_to_template(r) for r in fetchall(cur)]

    def find_overlapping(
        self,
        *,
        employee_id: str,
        start: date,
        end: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[ShiftTemplate]:
        clauses = ["employee_id=%s", "active=1", "effective_from<=%s", "effective_to>=%s"]
        params: list[object] = [employee_id, end, start]
        if exclude_id is not None:
            clauses.append("template_id<>%s")
            params.append(int(exclude_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEMPLATE_COLUMNS} FROM shift_templates WHERE {where}", tuple(params))
            return [_row_to_template(r) for r in fetchall(cur)]

    def list_for_employee(
        self,
        *,
        employee_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ShiftTemplate]:
        clauses = ["employee_id=%s"]
        params: list[object] = [employee_id]
        if end is not None:
            clauses.append("effective_from<=%s")
            params.append(end)
        if start is not None:
            clauses.append("effective_to>=%s")
            params.append(start)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TEMPLATE_COLUMNS} FROM shift_templates WHERE {where} ORDER BY effective_from ASC",
                tuple(params),
            )
            return [_row_to_template(r) for r in fetchall(cur)]

    def list_employee_ids(self, *, start: date, end: date) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT employee_id
                FROM shift_templates
                WHERE active=1 AND effective_from<=%s AND effective_to>=%s
                ORDER BY employee_id ASC
                """,
                (end, start),
            )
            return [str(r["employee_id"]) for r in fetchall(cur)]

    def create(self, template: ShiftTemplate) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_templates(
                    employee_id, effective_from, effective_to, shift_type, shift_start, shift_end,
                    crosses_midnight, active, grace_period_minutes, updated_by, change_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    template.employee_id,
                    template.effective_from,
                    template.effective_to,
                    template.shift_type.value,
                    template.shift_start,
                    template.shift_end,
                    1 if template.crosses_midnight else 0,
                    1 if template.active else 0,
                    int(template.grace_period_minutes),
                    template.updated_by,
                    template.change_reason,
                ),
            )
            return int(cur.lastrowid)

    def update(self, template: ShiftTemplate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_templates
                SET effective_from=%s, effective_to=%s, shift_type=%s, shift_start=%s, shift_end=%s,
                    crosses_midnight=%s, active=%s, grace_period_minutes=%s, updated_by=%s, change_reason=%s
                WHERE template_id=%s
                """,
                (
                    template.effective_from,
                    template.effective_to,
                    template.shift_type.value,
                    template.shift_start,
                    template.shift_end,
                    1 if template.crosses_midnight else 0,
                    1 if template.active else 0,
                    int(template.grace_period_minutes),
                    template.updated_by,
                    template.change_reason,
                    int(template.template_id),
                ),
            )
            return cur.rowcount > 0


class MySQLShiftOverrideRepository(ShiftOverrideRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_and_date(self, *, employee_id: str, shift_date: date) -> Sequence[ShiftOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_OVERRIDE_COLUMNS} FROM shift_overrides WHERE employee_id=%s AND shift_date=%s",
                (employee_id, shift_date),
            )
            return [_row_to_override(r) for r in fetchall(cur)]

    def get_by_id(self, override_id: int) -> Optional[ShiftOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_OVERRIDE_COLUMNS} FROM shift_overrides WHERE override_id=%s", (int(override_id),))
            r = fetchone(cur)
            return _row_to_override(r) if r else None

    def upsert(self, override: ShiftOverride) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_overrides(
                    employee_id, shift_date, override_type, shift_type, shift_start, shift_end,
                    crosses_midnight, updated_by, change_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    override_type=VALUES(override_type), shift_type=VALUES(shift_type),
                    shift_start=VALUES(shift_start), shift_end=VALUES(shift_end),
                    crosses_midnight=VALUES(crosses_midnight), updated_by=VALUES(updated_by),
                    change_reason=VALUES(change_reason)
                """,
                (
                    override.employee_id,
                    override.shift_date,
                    override.override_type.value,
                    override.shift_type.value if override.shift_type else None,
                    override.shift_start,
                    override.shift_end,
                    1 if override.crosses_midnight else 0,
                    override.updated_by,
                    override.change_reason,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch override_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT override_id FROM shift_overrides WHERE employee_id=%s AND shift_date=%s",
                (override.employee_id, override.shift_date),
            )
            r = fetchone(cur)
            return int(r["override_id"]) if r else 0

    def delete(self, *, override_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_overrides WHERE override_id=%s", (int(override_id),))
            return cur.rowcount > 0


class MySQLShiftResolvedRepository(ShiftResolvedRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, employee_id: str, shift_date: date) -> Optional[ResolvedShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, shift_date, source, shift_type, shift_start, shift_end,
                       crosses_midnight, grace_period_minutes, is_off_day_overtime,
                       template_id, override_id, leave_id, holiday_id, resolved_at
                FROM shift_resolved
                WHERE employee_id=%s AND shift_date=%s
                """,
                (employee_id, shift_date),
            )
            r = fetchone(cur)
            return _row_to_resolved(r) if r else None

    def upsert(self, resolved: ResolvedShift) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_resolved(
                    employee_id, shift_date, source, shift_type, shift_start, shift_end,
                    crosses_midnight, grace_period_minutes, is_off_day_overtime,
                    template_id, override_id, leave_id, holiday_id, resolved_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    source=VALUES(source), shift_type=VALUES(shift_type),
                    shift_start=VALUES(shift_start), shift_end=VALUES(shift_end),
                    crosses_midnight=VALUES(crosses_midnight),
                    grace_period_minutes=VALUES(grace_period_minutes),
                    is_off_day_overtime=VALUES(is_off_day_overtime),
                    template_id=VALUES(template_id), override_id=VALUES(override_id),
                    leave_id=VALUES(leave_id), holiday_id=VALUES(holiday_id),
                    resolved_at=VALUES(resolved_at)
                """,
                (
                    resolved.employee_id,
                    resolved.shift_date,
                    resolved.source.value,
                    resolved.shift_type.value if resolved.shift_type else None,
                    resolved.shift_start,
                    resolved.shift_end,
                    1 if resolved.crosses_midnight else 0,
                    int(resolved.grace_period_minutes),
                    1 if resolved.is_off_day_overtime else 0,
                    resolved.template_id,
                    resolved.override_id,
                    resolved.leave_id,
                    resolved.holiday_id,
                    resolved.resolved_at.replace(tzinfo=None) if resolved.resolved_at else None,
                ),
            )

    def delete_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> int:
        clauses = ["shift_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM shift_resolved WHERE {where}", tuple(params))
            return int(cur.rowcount or 0)
