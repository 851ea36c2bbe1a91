from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..common.datetime_utils import LocalClock, minutes_between, parse_iso_datetime
from ..common.validators import require_date_range, require_non_empty
from ..core.constants import (
    DEFAULT_DEVICE_ID,
    DEFAULT_DUPLICATE_SCAN_MINUTES,
    DEFAULT_SOURCE_IP,
    DEFAULT_TIMESTAMP_TOLERANCE_MINUTES,
    OVERNIGHT_CHECKOUT_TOLERANCE_MINUTES,
)
from ..core.enums import EventStatus, VerifyMode
from ..core.exceptions import ValidationError
from ..overtime.calculator import OvertimeCalculator
from ..shifts.resolver import ShiftResolver
from .model import AttendanceEvent, SessionReportRow
from .pairing import pair_events
from .punctuality import assess_punctuality
from .repository import AttendanceEventRepository, DeviceUserRepository

logger = logging.getLogger(__name__)

_CLOSING_STATUSES = (EventStatus.CHECK_OUT, EventStatus.OVERTIME_OUT)


class AttendanceService:
    def __init__(
        self,
        events: AttendanceEventRepository,
        resolver: ShiftResolver,
        calculator: OvertimeCalculator,
        device_users: DeviceUserRepository | None = None,
        *,
        timestamp_tolerance_minutes: Optional[int] = DEFAULT_TIMESTAMP_TOLERANCE_MINUTES,
        duplicate_window_minutes: int = DEFAULT_DUPLICATE_SCAN_MINUTES,
        checkout_tolerance_minutes: int = OVERNIGHT_CHECKOUT_TOLERANCE_MINUTES,
    ):
        self._events = events
        self._resolver = resolver
        self._calculator = calculator
        self._device_users = device_users
        self._clock: LocalClock = resolver.clock
        self._tolerance = timestamp_tolerance_minutes
        self._duplicate_window = int(duplicate_window_minutes)
        self._checkout_tolerance = int(checkout_tolerance_minutes)

    def record_event(
        self,
        *,
        device_user_id: str,
        timestamp: Union[str, datetime, None],
        verify_mode: Union[str, VerifyMode] = VerifyMode.FINGERPRINT,
        status: Union[str, EventStatus] = EventStatus.UNSPECIFIED,
        employee_id: Optional[str] = None,
        device_id: Optional[str] = None,
        source_ip: Optional[str] = None,
    ) -> int:
        """Append one scan from the device feed. Stored events are never modified."""

        device_user_id = require_non_empty(device_user_id, "Device user id")
        employee_id = str(employee_id or "").strip() or self._employee_for(device_user_id)

        try:
            verify_mode = VerifyMode(verify_mode)
            status = EventStatus(status)
        except ValueError as e:
            raise ValidationError(str(e))

        received_at = self._clock.now()
        event_time = self._normalize_timestamp(timestamp, received_at)

        return self._events.append(
            employee_id=employee_id,
            device_user_id=device_user_id,
            device_id=str(device_id or "").strip() or DEFAULT_DEVICE_ID,
            timestamp=self._clock.to_naive_local(event_time),
            verify_mode=verify_mode,
            status=status,
            source_ip=str(source_ip or "").strip() or DEFAULT_SOURCE_IP,
            received_at=self._clock.to_naive_local(received_at),
        )

    def sessions_for(self, employee_id: str, start: date, end: date) -> list[SessionReportRow]:
        """Paired sessions whose business day falls in [start, end], with OT."""

        require_date_range(start, end)

        # A night shift on ``end`` can close on the following morning.
        window_start = datetime.combine(start, time.min)
        window_end = datetime.combine(end + timedelta(days=2), time.min)
        events = self._events.list_for_employee(employee_id=employee_id, start=window_start, end=window_end)

        sessions = pair_events(events, self._business_day_for, duplicate_window_minutes=self._duplicate_window)

        rows: list[SessionReportRow] = []
        for s in sessions:
            if not (start <= s.business_day <= end):
                continue

            shift = self._resolver.resolve_or_none(employee_id, s.business_day)
            if shift is None:
                rows.append(
                    SessionReportRow(
                        employee_id=employee_id,
                        business_day=s.business_day,
                        check_in=s.check_in,
                        check_out=s.check_out,
                        ot_minutes=0,
                        source=None,
                        unscheduled=True,
                    )
                )
                continue

            decision = assess_punctuality(s.check_in, shift, self._clock)
            rows.append(
                SessionReportRow(
                    employee_id=employee_id,
                    business_day=s.business_day,
                    check_in=s.check_in,
                    check_out=s.check_out,
                    ot_minutes=self._calculator.calculate(s.check_in, s.check_out, shift),
                    source=shift.source.value,
                    late_minutes=decision.late_minutes,
                    flag=decision.flag,
                )
            )
        return rows

    def _business_day_for(self, event: AttendanceEvent) -> date:
        tolerance = self._checkout_tolerance if event.status in _CLOSING_STATUSES else 0
        _, business_day = self._resolver.resolve_for_timestamp(
            event.employee_id, event.timestamp, tolerance_minutes=tolerance
        )
        return business_day

    def _employee_for(self, device_user_id: str) -> str:
        if self._device_users is None:
            raise ValidationError("Employee id is required")

        employee_id = self._device_users.employee_for_device_user(device_user_id)
        if not employee_id:
            raise ValidationError(f"Device user {device_user_id} is not mapped to any employee")
        return employee_id

    def _normalize_timestamp(self, value: Union[str, datetime, None], now: datetime) -> datetime:
        """Device clocks drift; fall back to server time when the timestamp is unusable."""

        if isinstance(value, datetime):
            parsed = self._clock.to_local(value)
        else:
            try:
                parsed = self._clock.to_local(parse_iso_datetime(value))
            except ValidationError:
                logger.warning("Invalid timestamp received: %r. Using server time instead.", value)
                return now

        if self._tolerance is None:
            return parsed

        deviation = abs(minutes_between(parsed, now))
        if deviation > self._tolerance:
            logger.warning(
                "Timestamp deviation detected: %d minutes from server time. Using server time instead.",
                deviation,
            )
            return now
        return parsed
