from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Holiday, Leave


class LeaveRepository(Protocol):
    def find_approved_covering(self, *, employee_id: str, day: date) -> Optional[Leave]:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def find_covering(self, day: date) -> Optional[Holiday]:
        raise NotImplementedError
