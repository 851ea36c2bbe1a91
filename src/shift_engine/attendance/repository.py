from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventStatus, VerifyMode
from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
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
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: str, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        """Events with start <= timestamp < end, ordered by timestamp."""

        raise NotImplementedError


class DeviceUserRepository(Protocol):
    def employee_for_device_user(self, device_user_id: str) -> Optional[str]:
        raise NotImplementedError
