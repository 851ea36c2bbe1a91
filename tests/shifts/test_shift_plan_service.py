from __future__ import annotations

from datetime import date

import pytest

from shift_engine.core.enums import ShiftSource, ShiftType
from shift_engine.core.exceptions import NotFoundError, ValidationError
from shift_engine.shifts.service import ShiftPlanService


def test_standard_night_template_crosses_midnight(stores, container):
    ids = container.shift_plan_service.create_templates(
        employee_ids=["E001", "E002"],
        effective_from=date(2026, 3, 1),
        effective_to=date(2026, 3, 31),
        shift_type="night",
        updated_by="hr",
        change_reason="  rota  ",
    )

    assert ids == [1, 2]
    created = stores.templates.get_by_id(1)
    assert created.shift_type == ShiftType.NIGHT
    assert (created.shift_start, created.shift_end, created.crosses_midnight) == ("23:00", "07:00", True)
    assert created.grace_period_minutes == 10
    assert created.change_reason == "rota"


def test_overlapping_template_is_rejected(container):
    svc = container.shift_plan_service
    svc.create_templates(employee_ids=["E001"], effective_from=date(2026, 3, 1), effective_to=date(2026, 3, 31), shift_type="morning")

    with pytest.raises(ValidationError):
        svc.create_templates(employee_ids=["E001"], effective_from=date(2026, 3, 15), effective_to=date(2026, 4, 15), shift_type="evening")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"shift_type": "custom"},
        {"shift_type": "custom", "shift_start": "7:00", "shift_end": "15:00"},
        {"shift_type": "weekend"},
        {"shift_type": "morning", "effective_from": date(2026, 3, 10), "effective_to": date(2026, 3, 1)},
        {"shift_type": "morning", "grace_period_minutes": -1},
    ],
)
def test_invalid_template_input(container, kwargs):
    params = {"employee_ids": ["E001"], "effective_from": date(2026, 3, 1), "effective_to": date(2026, 3, 31)}
    params.update(kwargs)

    with pytest.raises(ValidationError):
        container.shift_plan_service.create_templates(**params)


def test_custom_template_detects_midnight_crossing(stores, container):
    container.shift_plan_service.create_templates(
        employee_ids=["E001"],
        effective_from=date(2026, 3, 1),
        effective_to=date(2026, 3, 31),
        shift_type="custom",
        shift_start="15:00",
        shift_end="01:00",
        grace_period_minutes=5,
    )

    created = stores.templates.get_by_id(1)
    assert created.crosses_midnight
    assert created.grace_period_minutes == 5


def test_default_grace_comes_from_settings(stores, container):
    svc = ShiftPlanService(stores.templates, stores.overrides, container.resolver, default_grace_minutes=15)
    svc.create_templates(employee_ids=["E001"], effective_from=date(2026, 3, 1), effective_to=date(2026, 3, 2), shift_type="morning")

    assert stores.templates.get_by_id(1).grace_period_minutes == 15


def test_set_override_invalidates_cached_resolution(container):
    svc = container.shift_plan_service
    svc.create_templates(employee_ids=["E001"], effective_from=date(2026, 3, 1), effective_to=date(2026, 3, 31), shift_type="morning")
    day = date(2026, 3, 4)
    assert container.resolver.resolve("E001", day).source == ShiftSource.TEMPLATE

    svc.set_override(employee_id="E001", shift_date=day, override_type="replace", shift_type="evening",
                     shift_start="15:00", shift_end="23:00")
    assert container.resolver.resolve("E001", day).shift_start == "15:00"

    svc.set_override(employee_id="E001", shift_date=day, override_type="cancel")
    resolved = container.resolver.resolve("E001", day)
    assert resolved.source == ShiftSource.OVERRIDE
    assert resolved.is_off_day_overtime


def test_set_override_upserts_one_row_per_day(stores, container):
    svc = container.shift_plan_service
    first = svc.set_override(employee_id="E001", shift_date=date(2026, 3, 4), override_type="off_day")
    second = svc.set_override(employee_id="E001", shift_date=date(2026, 3, 4), override_type="cancel")

    assert first == second
    assert len(stores.overrides.rows) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"override_type": "swap"},
        {"override_type": "replace", "shift_type": "custom", "shift_start": "09:00"},
        {"override_type": "replace", "shift_type": "custom", "shift_start": "9am", "shift_end": "17:00"},
    ],
)
def test_invalid_override_input(container, kwargs):
    with pytest.raises(ValidationError):
        container.shift_plan_service.set_override(employee_id="E001", shift_date=date(2026, 3, 4), **kwargs)


def test_delete_override_restores_template(container):
    svc = container.shift_plan_service
    svc.create_templates(employee_ids=["E001"], effective_from=date(2026, 3, 1), effective_to=date(2026, 3, 31), shift_type="morning")
    override_id = svc.set_override(employee_id="E001", shift_date=date(2026, 3, 4), override_type="cancel")
    assert container.resolver.resolve("E001", date(2026, 3, 4)).source == ShiftSource.OVERRIDE

    svc.delete_override(override_id=override_id)

    assert container.resolver.resolve("E001", date(2026, 3, 4)).source == ShiftSource.TEMPLATE
    with pytest.raises(NotFoundError):
        svc.delete_override(override_id=override_id)


def test_update_template_refreshes_resolution(container):
    svc = container.shift_plan_service
    (template_id,) = svc.create_templates(
        employee_ids=["E001"], effective_from=date(2026, 3, 1), effective_to=date(2026, 3, 31), shift_type="morning"
    )
    assert container.resolver.resolve("E001", date(2026, 3, 20)).shift_start == "07:00"

    updated = svc.update_template(template_id=template_id, shift_start="08:00", shift_end="16:00", effective_to=date(2026, 3, 15))

    assert updated.effective_to == date(2026, 3, 15)
    assert container.resolver.resolve_or_none("E001", date(2026, 3, 20)) is None
    assert container.resolver.resolve("E001", date(2026, 3, 10)).shift_start == "08:00"


def test_update_unknown_template(container):
    with pytest.raises(NotFoundError):
        container.shift_plan_service.update_template(template_id=99, shift_start="08:00")
