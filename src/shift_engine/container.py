from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceEventRepository, MySQLDeviceUserRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import LocalClock
from .config import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .overtime.calculator import OvertimeCalculator
from .overtime.factory import OvertimeStrategyFactory
from .overtime.service import OvertimeService
from .shifts.mysql_shift_repository import (
    MySQLShiftOverrideRepository,
    MySQLShiftResolvedRepository,
    MySQLShiftTemplateRepository,
)
from .shifts.resolver import ShiftResolver
from .shifts.service import ShiftPlanService
from .timeoff.mysql_timeoff_repository import MySQLHolidayRepository, MySQLLeaveRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    settings: EngineSettings
    clock: LocalClock

    resolver: ShiftResolver
    shift_plan_service: ShiftPlanService
    overtime_service: OvertimeService
    attendance_service: AttendanceService


def build_services(
    *,
    settings: EngineSettings,
    templates,
    overrides,
    resolved,
    leaves,
    holidays,
    events,
    device_users=None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire the services over any set of repositories (MySQL or in-memory)."""

    clock = LocalClock(settings.timezone)
    resolver = ShiftResolver(templates, overrides, resolved, leaves, holidays, clock=clock)
    calculator = OvertimeCalculator(clock, strategy_factory=OvertimeStrategyFactory())

    return Container(
        conn=conn,
        settings=settings,
        clock=clock,
        resolver=resolver,
        shift_plan_service=ShiftPlanService(
            templates,
            overrides,
            resolver,
            default_grace_minutes=settings.grace_minutes,
        ),
        overtime_service=OvertimeService(resolver, calculator),
        attendance_service=AttendanceService(
            events,
            resolver,
            calculator,
            device_users,
            timestamp_tolerance_minutes=settings.timestamp_tolerance_minutes,
            duplicate_window_minutes=settings.duplicate_scan_minutes,
        ),
    )


def build_container(*, db_config: Mapping, settings: Optional[EngineSettings] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return build_services(
        settings=settings or EngineSettings(),
        templates=MySQLShiftTemplateRepository(conn),
        overrides=MySQLShiftOverrideRepository(conn),
        resolved=MySQLShiftResolvedRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        events=MySQLAttendanceEventRepository(conn),
        device_users=MySQLDeviceUserRepository(conn),
        conn=conn,
    )
