from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from ..common.datetime_utils import LocalClock, iter_days
from ..core.enums import OverrideType, ShiftSource
from ..core.exceptions import ConflictError, NotFoundError
from ..timeoff.model import Holiday, Leave
from ..timeoff.repository import HolidayRepository, LeaveRepository
from .model import ResolvedShift, ShiftOverride, ShiftTemplate
from .repository import ShiftOverrideRepository, ShiftResolvedRepository, ShiftTemplateRepository

logger = logging.getLogger(__name__)


def _template_recency(t: ShiftTemplate) -> tuple:
    return (t.updated_at or datetime.min, t.created_at or datetime.min, t.template_id)


def pick_template(templates: Sequence[ShiftTemplate]) -> Optional[ShiftTemplate]:
    """Most recently updated template wins, then most recently created, then highest id."""
    if not templates:
        return None
    return max(templates, key=_template_recency)


@dataclass
class RecomputeSummary:
    resolved: int = 0
    unscheduled: int = 0
    conflicts: list[tuple[str, date]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.resolved + self.unscheduled + len(self.conflicts)


class ShiftResolver:
    """Merges holidays, leaves, overrides and templates into one shift per employee-day.

    The result is cached in the resolved store (read-through). The cache is
    only dropped through the explicit ``invalidate``/``on_*_changed`` hooks,
    which the scheduling/HR workflows call after they edit a source record.
    """

    def __init__(
        self,
        templates: ShiftTemplateRepository,
        overrides: ShiftOverrideRepository,
        resolved: ShiftResolvedRepository,
        leaves: LeaveRepository,
        holidays: HolidayRepository,
        *,
        clock: LocalClock,
    ):
        self._templates = templates
        self._overrides = overrides
        self._resolved = resolved
        self._leaves = leaves
        self._holidays = holidays
        self._clock = clock

    @property
    def clock(self) -> LocalClock:
        return self._clock

    def resolve(self, employee_id: str, day: date, *, refresh: bool = False) -> ResolvedShift:
        resolved = self.resolve_or_none(employee_id, day, refresh=refresh)
        if resolved is None:
            raise NotFoundError(f"No shift scheduled for employee {employee_id} on {day:%Y-%m-%d}")
        return resolved

    def resolve_or_none(self, employee_id: str, day: date, *, refresh: bool = False) -> Optional[ResolvedShift]:
        if not refresh:
            cached = self._resolved.get(employee_id=employee_id, shift_date=day)
            if cached:
                return cached

        resolved = self._compute(employee_id, day)
        if resolved is None:
            if refresh:
                self._resolved.delete_range(start=day, end=day, employee_id=employee_id)
            return None

        self._resolved.upsert(resolved)
        logger.debug("Resolved shift employee=%s date=%s source=%s", employee_id, day, resolved.source.value)
        return resolved

    def resolve_for_timestamp(
        self,
        employee_id: str,
        timestamp: datetime,
        *,
        tolerance_minutes: int = 0,
    ) -> Tuple[Optional[ResolvedShift], date]:
        """Shift and business day an attendance timestamp belongs to.

        A timestamp before the end of yesterday's overnight shift (plus
        ``tolerance_minutes``, used for check-outs) belongs to yesterday,
        whatever today holds. Otherwise today's shift decides the business
        day; if today is unscheduled, yesterday's shift is tried.
        """
        today = self._clock.local_date(timestamp)
        yesterday = today - timedelta(days=1)

        previous = self.resolve_or_none(employee_id, yesterday)
        if previous is not None and previous.has_times and previous.crosses_midnight:
            _, expected_end = self._clock.shift_window(yesterday, previous.shift_start, previous.shift_end, True)
            if self._clock.to_local(timestamp) < expected_end + timedelta(minutes=max(0, tolerance_minutes)):
                return previous, yesterday

        for candidate_day in (today, yesterday):
            candidate = self.resolve_or_none(employee_id, candidate_day)
            if candidate is None:
                continue

            business_day = self._clock.business_day_of(timestamp, candidate.start_hour, candidate.crosses_midnight)
            if business_day == candidate_day:
                return candidate, business_day
            return self.resolve_or_none(employee_id, business_day), business_day

        return None, today

    # Invalidation hooks ------------------------------------------------

    def invalidate(self, employee_id: str, start: date, end: Optional[date] = None) -> int:
        removed = self._resolved.delete_range(start=start, end=end or start, employee_id=employee_id)
        logger.info("Invalidated %d resolved shift(s) employee=%s %s..%s", removed, employee_id, start, end or start)
        return removed

    def invalidate_all(self, start: date, end: Optional[date] = None) -> int:
        removed = self._resolved.delete_range(start=start, end=end or start)
        logger.info("Invalidated %d resolved shift(s) for all employees %s..%s", removed, start, end or start)
        return removed

    def on_template_changed(self, template: ShiftTemplate) -> int:
        return self.invalidate(template.employee_id, template.effective_from, template.effective_to)

    def on_override_changed(self, override: ShiftOverride) -> int:
        return self.invalidate(override.employee_id, override.shift_date)

    def on_leave_changed(self, leave: Leave) -> int:
        return self.invalidate(leave.employee_id, leave.start_date, leave.end_date)

    def on_holiday_changed(self, holiday: Holiday) -> int:
        return self.invalidate_all(holiday.date_from, holiday.date_to)

    # Batch -------------------------------------------------------------

    def recompute(self, employee_ids: Iterable[str], start: date, end: date) -> RecomputeSummary:
        """Refresh every employee-day in [start, end].

        Each day is upserted on its own, so a crash part-way leaves earlier
        rows valid and the job can simply be rerun.
        """
        summary = RecomputeSummary()
        for employee_id in employee_ids:
            for day in iter_days(start, end):
                try:
                    resolved = self.resolve_or_none(employee_id, day, refresh=True)
                except ConflictError as e:
                    logger.error("Conflicting overrides employee=%s date=%s: %s", employee_id, day, e)
                    summary.conflicts.append((employee_id, day))
                    continue

                if resolved is None:
                    summary.unscheduled += 1
                else:
                    summary.resolved += 1

        logger.info(
            "Recompute summary %s..%s: resolved=%d, unscheduled=%d, conflicts=%d",
            start,
            end,
            summary.resolved,
            summary.unscheduled,
            len(summary.conflicts),
        )
        return summary

    # Precedence --------------------------------------------------------

    def _compute(self, employee_id: str, day: date) -> Optional[ResolvedShift]:
        now = self._clock.now()

        holiday = self._holidays.find_covering(day)
        if holiday:
            return ResolvedShift(
                employee_id=employee_id,
                shift_date=day,
                source=ShiftSource.HOLIDAY,
                is_off_day_overtime=True,
                holiday_id=holiday.holiday_id,
                resolved_at=now,
            )

        leave = self._leaves.find_approved_covering(employee_id=employee_id, day=day)
        if leave:
            return ResolvedShift(
                employee_id=employee_id,
                shift_date=day,
                source=ShiftSource.LEAVE,
                is_off_day_overtime=True,
                leave_id=leave.leave_id,
                resolved_at=now,
            )

        overrides = self._overrides.list_for_employee_and_date(employee_id=employee_id, shift_date=day)
        if len(overrides) > 1:
            raise ConflictError(
                f"{len(overrides)} overrides exist for employee {employee_id} on {day:%Y-%m-%d}"
            )
        if overrides:
            return self._from_override(overrides[0], now)

        templates = self._templates.list_active_covering(employee_id=employee_id, day=day)
        template = pick_template(templates)
        if template is None:
            return None
        if len(templates) > 1:
            logger.warning(
                "%d active templates overlap employee=%s date=%s; using template_id=%s",
                len(templates),
                employee_id,
                day,
                template.template_id,
            )

        return ResolvedShift(
            employee_id=employee_id,
            shift_date=day,
            source=ShiftSource.TEMPLATE,
            shift_type=template.shift_type,
            shift_start=template.shift_start,
            shift_end=template.shift_end,
            crosses_midnight=template.crosses_midnight,
            grace_period_minutes=template.grace_period_minutes,
            template_id=template.template_id,
            resolved_at=now,
        )

    @staticmethod
    def _from_override(override: ShiftOverride, now: datetime) -> ResolvedShift:
        if override.override_type == OverrideType.CANCEL:
            return ResolvedShift(
                employee_id=override.employee_id,
                shift_date=override.shift_date,
                source=ShiftSource.OVERRIDE,
                is_off_day_overtime=True,
                override_id=override.override_id,
                resolved_at=now,
            )

        return ResolvedShift(
            employee_id=override.employee_id,
            shift_date=override.shift_date,
            source=ShiftSource.OVERRIDE,
            shift_type=override.shift_type,
            shift_start=override.shift_start,
            shift_end=override.shift_end,
            crosses_midnight=override.crosses_midnight,
            is_off_day_overtime=override.override_type == OverrideType.OFF_DAY,
            override_id=override.override_id,
            resolved_at=now,
        )
