from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from shift_engine.attendance.model import AttendanceEvent
from shift_engine.config import EngineSettings
from shift_engine.container import Container, build_services
from shift_engine.shifts.model import ResolvedShift, ShiftOverride, ShiftTemplate
from shift_engine.timeoff.model import Holiday, Leave


class InMemoryTemplates:
    def __init__(self):
        self.items: dict[int, ShiftTemplate] = {}
        self._id = 0
        self._tick = 0

    def _stamp(self) -> datetime:
        self._tick += 1
        return datetime(2026, 1, 1) + timedelta(seconds=self._tick)

    def add(self, template: ShiftTemplate) -> ShiftTemplate:
        self._id = max(self._id, template.template_id)
        self.items[template.template_id] = template
        return template

    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        return self.items.get(template_id)

    def list_active_covering(self, *, employee_id: str, day: date):
        return [t for t in self.items.values() if t.employee_id == employee_id and t.covers(day)]

    def find_overlapping(self, *, employee_id: str, start: date, end: date, exclude_id: Optional[int] = None):
        return [
            t
            for t in self.items.values()
            if t.employee_id == employee_id
            and t.active
            and t.template_id != exclude_id
            and t.effective_from <= end
            and t.effective_to >= start
        ]

    def list_for_employee(self, *, employee_id: str, start: Optional[date] = None, end: Optional[date] = None):
        out = [t for t in self.items.values() if t.employee_id == employee_id]
        if start is not None:
            out = [t for t in out if t.effective_to >= start]
        if end is not None:
            out = [t for t in out if t.effective_from <= end]
        return sorted(out, key=lambda t: t.effective_from)

    def list_employee_ids(self, *, start: date, end: date):
        return sorted(
            {t.employee_id for t in self.items.values() if t.active and t.effective_from <= end and t.effective_to >= start}
        )

    def create(self, template: ShiftTemplate) -> int:
        self._id += 1
        stamp = self._stamp()
        self.items[self._id] = replace(template, template_id=self._id, created_at=stamp, updated_at=stamp)
        return self._id

    def update(self, template: ShiftTemplate) -> bool:
        if template.template_id not in self.items:
            return False
        self.items[template.template_id] = replace(template, updated_at=self._stamp())
        return True


class InMemoryOverrides:
    def __init__(self):
        self.rows: list[ShiftOverride] = []
        self._id = 0

    def list_for_employee_and_date(self, *, employee_id: str, shift_date: date):
        return [o for o in self.rows if o.employee_id == employee_id and o.shift_date == shift_date]

    def get_by_id(self, override_id: int) -> Optional[ShiftOverride]:
        return next((o for o in self.rows if o.override_id == override_id), None)

    def upsert(self, override: ShiftOverride) -> int:
        existing = self.list_for_employee_and_date(employee_id=override.employee_id, shift_date=override.shift_date)
        if existing:
            stored = replace(override, override_id=existing[0].override_id)
            self.rows = [stored if o is existing[0] else o for o in self.rows]
            return stored.override_id

        self._id += 1
        self.rows.append(replace(override, override_id=self._id))
        return self._id

    def delete(self, *, override_id: int) -> bool:
        before = len(self.rows)
        self.rows = [o for o in self.rows if o.override_id != override_id]
        return len(self.rows) < before


class InMemoryResolved:
    def __init__(self):
        self.rows: dict[tuple[str, date], ResolvedShift] = {}
        self.upserts = 0

    def get(self, *, employee_id: str, shift_date: date) -> Optional[ResolvedShift]:
        return self.rows.get((employee_id, shift_date))

    def upsert(self, resolved: ResolvedShift) -> None:
        self.upserts += 1
        self.rows[(resolved.employee_id, resolved.shift_date)] = resolved

    def delete_range(self, *, start: date, end: date, employee_id: Optional[str] = None) -> int:
        keys = [k for k in self.rows if start <= k[1] <= end and (employee_id is None or k[0] == employee_id)]
        for k in keys:
            del self.rows[k]
        return len(keys)


@dataclass
class InMemoryLeaves:
    items: list[Leave] = field(default_factory=list)

    def find_approved_covering(self, *, employee_id: str, day: date) -> Optional[Leave]:
        return next((lv for lv in self.items if lv.employee_id == employee_id and lv.covers(day)), None)


@dataclass
class InMemoryHolidays:
    items: list[Holiday] = field(default_factory=list)

    def find_covering(self, day: date) -> Optional[Holiday]:
        return next((h for h in self.items if h.covers(day)), None)


class InMemoryEvents:
    def __init__(self):
        self.items: list[AttendanceEvent] = []

    def append(self, **kwargs) -> int:
        event_id = len(self.items) + 1
        self.items.append(AttendanceEvent(event_id=event_id, **kwargs))
        return event_id

    def list_for_employee(self, *, employee_id: str, start: datetime, end: datetime):
        out = [e for e in self.items if e.employee_id == employee_id and start <= e.timestamp < end]
        return sorted(out, key=lambda e: (e.timestamp, e.event_id))


@dataclass
class InMemoryDeviceUsers:
    mapping: dict[str, str] = field(default_factory=dict)

    def employee_for_device_user(self, device_user_id: str) -> Optional[str]:
        return self.mapping.get(device_user_id)


@dataclass
class Stores:
    templates: InMemoryTemplates
    overrides: InMemoryOverrides
    resolved: InMemoryResolved
    leaves: InMemoryLeaves
    holidays: InMemoryHolidays
    events: InMemoryEvents
    device_users: InMemoryDeviceUsers


@pytest.fixture
def stores() -> Stores:
    return Stores(
        templates=InMemoryTemplates(),
        overrides=InMemoryOverrides(),
        resolved=InMemoryResolved(),
        leaves=InMemoryLeaves(),
        holidays=InMemoryHolidays(),
        events=InMemoryEvents(),
        device_users=InMemoryDeviceUsers({"42": "E001"}),
    )


@pytest.fixture
def container(stores: Stores) -> Container:
    return build_services(
        settings=EngineSettings(),
        templates=stores.templates,
        overrides=stores.overrides,
        resolved=stores.resolved,
        leaves=stores.leaves,
        holidays=stores.holidays,
        events=stores.events,
        device_users=stores.device_users,
    )
