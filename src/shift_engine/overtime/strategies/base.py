from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...common.datetime_utils import LocalClock
from ...shifts.model import ResolvedShift


class OvertimeStrategy(ABC):
    """Strategy Pattern: encapsulate how a closed attendance pair turns into OT minutes."""

    @abstractmethod
    def overtime_minutes(self, *, in_time: datetime, out_time: datetime, shift: ResolvedShift, clock: LocalClock) -> int:
        raise NotImplementedError
