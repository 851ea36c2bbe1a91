from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .config import EngineSettings, get_settings_module, load_settings
from .container import Container, build_container
from .core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .overtime.controller import register as register_overtime
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify({"success": False, "error": "validation_error", "message": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "error": "no_shift_scheduled", "message": str(e)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"success": False, "error": "conflict", "message": str(e)}), 409

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return jsonify({"success": False, "error": "domain_error", "message": str(e)}), 400


def create_app(container: Optional[Container] = None) -> Flask:
    """Flask app factory.

    Tests pass a prebuilt container (in-memory repositories); otherwise the
    settings module picked by ``APP_ENV`` supplies DB and engine values.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = load_settings(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, settings=EngineSettings.from_module(settings))

    _register_error_handlers(app)
    register_shifts(app, container)
    register_overtime(app, container)
    register_attendance(app, container)

    return app
