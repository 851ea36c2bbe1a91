import importlib
import os
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_DUPLICATE_SCAN_MINUTES,
    DEFAULT_GRACE_MINUTES,
    DEFAULT_TIMESTAMP_TOLERANCE_MINUTES,
    DEFAULT_TIMEZONE,
)


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "shift_engine.config.production"

    if env in {"test", "testing"}:
        return "shift_engine.config.testing"

    return "shift_engine.config.development"


@dataclass(frozen=True)
class EngineSettings:
    """Values the engine services are built from (see ``build_container``)."""

    timezone: str = DEFAULT_TIMEZONE
    grace_minutes: int = DEFAULT_GRACE_MINUTES
    timestamp_tolerance_minutes: int = DEFAULT_TIMESTAMP_TOLERANCE_MINUTES
    duplicate_scan_minutes: int = DEFAULT_DUPLICATE_SCAN_MINUTES

    @classmethod
    def from_module(cls, settings) -> "EngineSettings":
        return cls(
            timezone=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
            grace_minutes=int(getattr(settings, "GRACE_MINUTES", DEFAULT_GRACE_MINUTES)),
            timestamp_tolerance_minutes=int(
                getattr(settings, "TIMESTAMP_TOLERANCE_MINUTES", DEFAULT_TIMESTAMP_TOLERANCE_MINUTES)
            ),
            duplicate_scan_minutes=int(getattr(settings, "DUPLICATE_SCAN_MINUTES", DEFAULT_DUPLICATE_SCAN_MINUTES)),
        )


def load_settings(module_name: Optional[str] = None):
    """Import the selected settings module (``APP_ENV`` when not given)."""
    return importlib.import_module(module_name or get_settings_module())
