from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ResolvedShift, ShiftOverride, ShiftTemplate


class ShiftTemplateRepository(Protocol):
    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        raise NotImplementedError

    def list_active_covering(self, *, employee_id: str, day: date) -> Sequence[ShiftTemplate]:
        """Active templates whose [effective_from, effective_to] contains ``day``."""

        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: str,
        start: date,
        end: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[ShiftTemplate]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[ShiftTemplate]:
        raise NotImplementedError

    def list_employee_ids(self, *, start: date, end: date) -> Sequence[str]:
        """Employees with an active template overlapping [start, end]."""

        raise NotImplementedError

    def create(self, template: ShiftTemplate) -> int:
        raise NotImplementedError

    def update(self, template: ShiftTemplate) -> bool:
        raise NotImplementedError


class ShiftOverrideRepository(Protocol):
    def list_for_employee_and_date(self, *, employee_id: str, shift_date: date) -> Sequence[ShiftOverride]:
        """All rows for the key; more than one means the unique index was bypassed."""

        raise NotImplementedError

    def get_by_id(self, override_id: int) -> Optional[ShiftOverride]:
        raise NotImplementedError

    def upsert(self, override: ShiftOverride) -> int:
        """Create or replace the override for (employee, shift_date).

        Returns override_id.
        """

        raise NotImplementedError

    def delete(self, *, override_id: int) -> bool:
        raise NotImplementedError


class ShiftResolvedRepository(Protocol):
    def get(self, *, employee_id: str, shift_date: date) -> Optional[ResolvedShift]:
        raise NotImplementedError

    def upsert(self, resolved: ResolvedShift) -> None:
        """Insert or overwrite the row keyed by (employee, shift_date)."""

        raise NotImplementedError

    def delete_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> int:
        """Drop cached rows in [start, end]; all employees when ``employee_id`` is None."""

        raise NotImplementedError
