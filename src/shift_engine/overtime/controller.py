from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/overtime", methods=["POST"], endpoint="compute_overtime")
    def compute_overtime():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON object body is required")

        employee_id = require_non_empty(str(data.get("employee_id") or ""), "employee_id")
        if not data.get("in_time"):
            raise ValidationError("in_time is required")
        in_time = parse_iso_datetime(data["in_time"])
        out_time = parse_iso_datetime(data["out_time"]) if data.get("out_time") else None

        result = container.overtime_service.compute_overtime(employee_id, in_time, out_time)
        return jsonify({"success": True, **result.to_dict()}), 200
