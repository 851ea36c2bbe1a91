from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..overtime.formatting import format_ot


def _row_dict(row) -> dict:
    return {
        "employee_id": row.employee_id,
        "business_day": row.business_day.strftime("%Y-%m-%d"),
        "check_in": row.check_in.isoformat(),
        "check_out": row.check_out.isoformat() if row.check_out else None,
        "ot_minutes": row.ot_minutes,
        "ot": format_ot(row.ot_minutes),
        "source": row.source,
        "late_minutes": row.late_minutes,
        "flag": row.flag.value if row.flag else None,
        "unscheduled": row.unscheduled,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/events", methods=["POST"], endpoint="record_event")
    def record_event():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON object body is required")

        event_id = container.attendance_service.record_event(
            device_user_id=str(data.get("device_user_id") or ""),
            timestamp=data.get("timestamp"),
            verify_mode=data.get("verify_mode") or "fingerprint",
            status=data.get("status") or "unspecified",
            employee_id=data.get("employee_id"),
            device_id=data.get("device_id"),
            source_ip=data.get("source_ip") or request.remote_addr,
        )
        return jsonify({"success": True, "event_id": event_id}), 201

    @app.route("/api/attendance/<employee_id>/sessions", methods=["GET"], endpoint="attendance_sessions")
    def attendance_sessions(employee_id: str):
        start = parse_iso_date(request.args.get("start"))
        end = parse_iso_date(request.args.get("end") or request.args.get("start"))
        rows = container.attendance_service.sessions_for(employee_id, start, end)
        return jsonify({"success": True, "sessions": [_row_dict(r) for r in rows]}), 200
