from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_date_range
from ..container import Container
from ..core.exceptions import ValidationError


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object body is required")
    return data


def _template_dict(t) -> dict:
    return {
        "template_id": t.template_id,
        "employee_id": t.employee_id,
        "effective_from": t.effective_from.strftime("%Y-%m-%d"),
        "effective_to": t.effective_to.strftime("%Y-%m-%d"),
        "shift_type": t.shift_type.value,
        "shift_start": t.shift_start,
        "shift_end": t.shift_end,
        "crosses_midnight": t.crosses_midnight,
        "active": t.active,
        "grace_period_minutes": t.grace_period_minutes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts/<employee_id>/<day>", methods=["GET"], endpoint="resolve_shift")
    def resolve_shift(employee_id: str, day: str):
        refresh = request.args.get("refresh", "0").lower() in {"1", "true", "yes"}
        resolved = container.resolver.resolve(employee_id, parse_iso_date(day), refresh=refresh)
        return jsonify({"success": True, "shift": resolved.to_dict()}), 200

    @app.route("/api/shifts/<employee_id>/invalidate", methods=["POST"], endpoint="invalidate_shifts")
    def invalidate_shifts(employee_id: str):
        data = _json_body()
        start = parse_iso_date(data.get("start"))
        end = parse_iso_date(data.get("end") or data.get("start"))
        require_date_range(start, end)
        removed = container.resolver.invalidate(employee_id, start, end)
        return jsonify({"success": True, "removed": removed}), 200

    @app.route("/api/shifts/recompute", methods=["POST"], endpoint="recompute_shifts")
    def recompute_shifts():
        data = _json_body()
        employee_ids = [str(e) for e in (data.get("employee_ids") or []) if str(e).strip()]
        if not employee_ids:
            raise ValidationError("employee_ids is required")
        start = parse_iso_date(data.get("start"))
        end = parse_iso_date(data.get("end") or data.get("start"))
        require_date_range(start, end)

        summary = container.resolver.recompute(employee_ids, start, end)
        return (
            jsonify(
                {
                    "success": True,
                    "resolved": summary.resolved,
                    "unscheduled": summary.unscheduled,
                    "conflicts": [
                        {"employee_id": e, "shift_date": d.strftime("%Y-%m-%d")} for e, d in summary.conflicts
                    ],
                }
            ),
            200,
        )

    @app.route("/api/shift-overrides", methods=["POST"], endpoint="set_override")
    def set_override():
        data = _json_body()
        override_id = container.shift_plan_service.set_override(
            employee_id=str(data.get("employee_id") or "").strip(),
            shift_date=parse_iso_date(data.get("shift_date")),
            override_type=str(data.get("override_type") or ""),
            shift_type=data.get("shift_type"),
            shift_start=data.get("shift_start"),
            shift_end=data.get("shift_end"),
            updated_by=data.get("updated_by"),
            change_reason=data.get("change_reason"),
        )
        return jsonify({"success": True, "override_id": override_id}), 200

    @app.route("/api/shift-overrides/<int:override_id>", methods=["DELETE"], endpoint="delete_override")
    def delete_override(override_id: int):
        container.shift_plan_service.delete_override(override_id=override_id)
        return jsonify({"success": True}), 200

    @app.route("/api/shift-templates", methods=["POST"], endpoint="create_templates")
    def create_templates():
        data = _json_body()
        employee_ids = data.get("employee_ids") or ([data["employee_id"]] if data.get("employee_id") else [])
        ids = container.shift_plan_service.create_templates(
            employee_ids=[str(e) for e in employee_ids],
            effective_from=parse_iso_date(data.get("effective_from")),
            effective_to=parse_iso_date(data.get("effective_to")),
            shift_type=str(data.get("shift_type") or ""),
            shift_start=data.get("shift_start"),
            shift_end=data.get("shift_end"),
            grace_period_minutes=data.get("grace_period_minutes"),
            updated_by=data.get("updated_by"),
            change_reason=data.get("change_reason"),
        )
        return jsonify({"success": True, "template_ids": ids}), 201

    @app.route("/api/shift-templates/<int:template_id>", methods=["PATCH"], endpoint="update_template")
    def update_template(template_id: int):
        data = _json_body()
        updated = container.shift_plan_service.update_template(
            template_id=template_id,
            shift_type=data.get("shift_type"),
            shift_start=data.get("shift_start"),
            shift_end=data.get("shift_end"),
            effective_from=parse_iso_date(data["effective_from"]) if data.get("effective_from") else None,
            effective_to=parse_iso_date(data["effective_to"]) if data.get("effective_to") else None,
            active=data.get("active"),
            updated_by=data.get("updated_by"),
            change_reason=data.get("change_reason"),
        )
        return jsonify({"success": True, "template": _template_dict(updated)}), 200

    @app.route("/api/shift-templates/<employee_id>", methods=["GET"], endpoint="list_templates")
    def list_templates(employee_id: str):
        start = parse_iso_date(request.args["start"]) if request.args.get("start") else None
        end = parse_iso_date(request.args["end"]) if request.args.get("end") else None
        templates = container.shift_plan_service.list_templates(employee_id=employee_id, start=start, end=end)
        return jsonify({"success": True, "templates": [_template_dict(t) for t in templates]}), 200
