"""Example: call the service layer directly (no Flask).

Controllers are thin; the shift and OT rules live in the services.
"""

from datetime import datetime

from shift_engine.config import EngineSettings, load_settings
from shift_engine.container import build_container


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, settings=EngineSettings.from_module(settings))

    result = container.overtime_service.compute_overtime(
        "E001",
        datetime(2026, 2, 1, 7, 0),
        datetime(2026, 2, 1, 17, 0),
    )
    print(result.to_dict())


if __name__ == "__main__":
    main()
