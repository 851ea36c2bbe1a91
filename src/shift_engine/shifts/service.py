from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.validators import crosses_midnight, require_date_range, validate_shift_times
from ..core.constants import DEFAULT_GRACE_MINUTES, STANDARD_SHIFTS
from ..core.enums import OverrideType, ShiftType
from ..core.exceptions import NotFoundError, ValidationError
from .model import ShiftOverride, ShiftTemplate
from .repository import ShiftOverrideRepository, ShiftTemplateRepository
from .resolver import ShiftResolver

logger = logging.getLogger(__name__)


def _shift_type(value) -> ShiftType:
    try:
        return ShiftType(value)
    except ValueError:
        raise ValidationError(f"Invalid shift type: {value!r}")


def standard_times(shift_type: ShiftType, shift_start: Optional[str], shift_end: Optional[str]) -> tuple[str, str, bool]:
    """(start, end, crosses_midnight) for a shift type; custom shifts bring their own times."""

    if shift_type == ShiftType.CUSTOM:
        if not shift_start or not shift_end:
            raise ValidationError("Custom shifts require shift_start and shift_end")
        crosses = crosses_midnight(shift_start, shift_end)
        validate_shift_times(shift_start, shift_end, crosses)
        return shift_start, shift_end, crosses

    start, end, crosses = STANDARD_SHIFTS[shift_type.value]
    return start, end, crosses


class ShiftPlanService:
    """Scheduling-side writes to templates and overrides.

    Every write calls the resolver's invalidation hook for the affected
    dates so the next resolution recomputes from the sources.
    """

    def __init__(
        self,
        templates: ShiftTemplateRepository,
        overrides: ShiftOverrideRepository,
        resolver: ShiftResolver,
        *,
        default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
    ):
        self._templates = templates
        self._overrides = overrides
        self._resolver = resolver
        self._default_grace = int(default_grace_minutes)

    def set_override(
        self,
        *,
        employee_id: str,
        shift_date: date,
        override_type: str,
        shift_type: Optional[str] = None,
        shift_start: Optional[str] = None,
        shift_end: Optional[str] = None,
        updated_by: Optional[str] = None,
        change_reason: Optional[str] = None,
    ) -> int:
        try:
            kind = OverrideType(override_type)
        except ValueError:
            raise ValidationError(f"Invalid override type: {override_type!r}")

        if kind == OverrideType.REPLACE and not (shift_type and shift_start and shift_end):
            raise ValidationError("Replace overrides require shift_type, shift_start and shift_end")

        crosses = False
        if shift_start and shift_end:
            crosses = crosses_midnight(shift_start, shift_end)
            validate_shift_times(shift_start, shift_end, crosses)

        override = ShiftOverride(
            override_id=0,
            employee_id=employee_id,
            shift_date=shift_date,
            override_type=kind,
            shift_type=_shift_type(shift_type) if shift_type else None,
            shift_start=shift_start,
            shift_end=shift_end,
            crosses_midnight=crosses,
            updated_by=updated_by,
            change_reason=(change_reason or "").strip() or None,
        )
        override_id = self._overrides.upsert(override)
        self._resolver.on_override_changed(override)
        logger.info("Override %s set employee=%s date=%s", kind.value, employee_id, shift_date)
        return override_id

    def delete_override(self, *, override_id: int) -> None:
        existing = self._overrides.get_by_id(int(override_id))
        if not existing:
            raise NotFoundError("Override not found")

        if not self._overrides.delete(override_id=existing.override_id):
            raise ValidationError("Failed to delete override")
        self._resolver.on_override_changed(existing)

    def create_templates(
        self,
        *,
        employee_ids: Iterable[str],
        effective_from: date,
        effective_to: date,
        shift_type: str,
        shift_start: Optional[str] = None,
        shift_end: Optional[str] = None,
        grace_period_minutes: Optional[int] = None,
        updated_by: Optional[str] = None,
        change_reason: Optional[str] = None,
    ) -> list[int]:
        """Create one template per employee; refuses when any would overlap an active one."""

        require_date_range(effective_from, effective_to, field_name="Effective range")
        kind = _shift_type(shift_type)
        start, end, crosses = standard_times(kind, shift_start, shift_end)
        if grace_period_minutes is not None and int(grace_period_minutes) < 0:
            raise ValidationError("Grace period cannot be negative")

        employee_ids = [e for e in employee_ids if e]
        if not employee_ids:
            raise ValidationError("At least one employee is required")

        for employee_id in employee_ids:
            if self._templates.find_overlapping(employee_id=employee_id, start=effective_from, end=effective_to):
                raise ValidationError(f"Overlapping shift template exists for employee {employee_id}")

        created: list[int] = []
        for employee_id in employee_ids:
            template = ShiftTemplate(
                template_id=0,
                employee_id=employee_id,
                effective_from=effective_from,
                effective_to=effective_to,
                shift_type=kind,
                shift_start=start,
                shift_end=end,
                crosses_midnight=crosses,
                active=True,
                grace_period_minutes=self._default_grace if grace_period_minutes is None else int(grace_period_minutes),
                updated_by=updated_by,
                change_reason=(change_reason or "").strip() or None,
            )
            created.append(self._templates.create(template))
            self._resolver.on_template_changed(template)

        logger.info("Created %d shift template(s) %s..%s", len(created), effective_from, effective_to)
        return created

    def update_template(
        self,
        *,
        template_id: int,
        shift_type: Optional[str] = None,
        shift_start: Optional[str] = None,
        shift_end: Optional[str] = None,
        effective_from: Optional[date] = None,
        effective_to: Optional[date] = None,
        active: Optional[bool] = None,
        updated_by: Optional[str] = None,
        change_reason: Optional[str] = None,
    ) -> ShiftTemplate:
        existing = self._templates.get_by_id(int(template_id))
        if not existing:
            raise NotFoundError("Shift template not found")

        start = shift_start or existing.shift_start
        end = shift_end or existing.shift_end
        crosses = crosses_midnight(start, end)
        validate_shift_times(start, end, crosses)

        target_from = effective_from or existing.effective_from
        target_to = effective_to or existing.effective_to
        require_date_range(target_from, target_to, field_name="Effective range")

        target_active = existing.active if active is None else bool(active)
        if target_active and self._templates.find_overlapping(
            employee_id=existing.employee_id,
            start=target_from,
            end=target_to,
            exclude_id=existing.template_id,
        ):
            raise ValidationError("Update causes overlap with an existing active shift template")

        updated = replace(
            existing,
            shift_type=_shift_type(shift_type) if shift_type else existing.shift_type,
            shift_start=start,
            shift_end=end,
            crosses_midnight=crosses,
            effective_from=target_from,
            effective_to=target_to,
            active=target_active,
            updated_by=updated_by,
            change_reason=(change_reason or "").strip() or existing.change_reason,
        )
        if not self._templates.update(updated):
            raise ValidationError("Failed to update shift template")

        # Both the old and the new range may hold stale resolutions.
        self._resolver.on_template_changed(existing)
        self._resolver.on_template_changed(updated)
        return updated

    def list_templates(
        self,
        *,
        employee_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ShiftTemplate]:
        return self._templates.list_for_employee(employee_id=employee_id, start=start, end=end)
