from __future__ import annotations

from datetime import date

import pytest

from shift_engine.core.enums import OverrideType, ShiftType
from shift_engine.main import create_app
from shift_engine.shifts.model import ShiftOverride, ShiftTemplate


@pytest.fixture
def client(monkeypatch, stores, container):
    monkeypatch.setenv("APP_ENV", "testing")
    stores.templates.add(
        ShiftTemplate(
            template_id=1,
            employee_id="E001",
            effective_from=date(2026, 2, 1),
            effective_to=date(2026, 2, 28),
            shift_type=ShiftType.MORNING,
            shift_start="07:00",
            shift_end="15:00",
        )
    )
    app = create_app(container)
    app.config["TESTING"] = True
    return app.test_client()


def test_get_resolved_shift(client):
    resp = client.get("/api/shifts/E001/2026-02-02")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["shift"]["source"] == "template"
    assert body["shift"]["shift_start"] == "07:00"


def test_unscheduled_day_is_404(client):
    resp = client.get("/api/shifts/E001/2026-03-02")

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "no_shift_scheduled"


def test_bad_date_is_400(client):
    assert client.get("/api/shifts/E001/02-02-2026").status_code == 400


def test_conflicting_overrides_are_409(client, stores):
    for override_id in (1, 2):
        stores.overrides.rows.append(
            ShiftOverride(override_id=override_id, employee_id="E001", shift_date=date(2026, 2, 5), override_type=OverrideType.CANCEL)
        )

    resp = client.get("/api/shifts/E001/2026-02-05")

    assert resp.status_code == 409
    assert resp.get_json()["error"] == "conflict"


def test_invalidate_drops_cached_rows(client, stores):
    client.get("/api/shifts/E001/2026-02-02")
    client.get("/api/shifts/E001/2026-02-03")

    resp = client.post("/api/shifts/E001/invalidate", json={"start": "2026-02-01", "end": "2026-02-28"})

    assert resp.status_code == 200
    assert resp.get_json()["removed"] == 2
    assert stores.resolved.rows == {}


def test_compute_overtime_endpoint(client):
    resp = client.post(
        "/api/overtime",
        json={"employee_id": "E001", "in_time": "2026-02-02T07:00:00", "out_time": "2026-02-02T17:00:00"},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["minutes"] == 98
    assert body["formatted"] == "1:38"
    assert body["hours"] == "1.63"
    assert body["business_day"] == "2026-02-02"


def test_compute_overtime_requires_in_time(client):
    assert client.post("/api/overtime", json={"employee_id": "E001"}).status_code == 400


def test_override_then_resolve(client):
    resp = client.post(
        "/api/shift-overrides",
        json={"employee_id": "E001", "shift_date": "2026-02-06", "override_type": "off_day"},
    )
    assert resp.status_code == 200

    shift = client.get("/api/shifts/E001/2026-02-06").get_json()["shift"]
    assert shift["source"] == "override"
    assert shift["is_off_day_overtime"] is True


def test_create_template_overlap_is_400(client):
    resp = client.post(
        "/api/shift-templates",
        json={"employee_ids": ["E001"], "effective_from": "2026-02-10", "effective_to": "2026-03-10", "shift_type": "evening"},
    )

    assert resp.status_code == 400


def test_record_event_and_list_sessions(client, stores):
    resp = client.post("/api/attendance/events", json={"device_user_id": "42", "status": "check-in"})

    assert resp.status_code == 201
    assert resp.get_json()["event_id"] == 1
    assert stores.events.items[0].employee_id == "E001"

    resp = client.get("/api/attendance/E001/sessions?start=2026-02-01&end=2026-02-28")
    assert resp.status_code == 200
    assert "sessions" in resp.get_json()


def test_record_event_with_numeric_fields_is_stored(client, stores):
    resp = client.post(
        "/api/attendance/events",
        json={"device_user_id": 42, "employee_id": 1001, "timestamp": 1769911200, "status": "check-in"},
    )

    assert resp.status_code == 201
    assert stores.events.items[0].employee_id == "1001"
    assert stores.events.items[0].device_user_id == "42"
