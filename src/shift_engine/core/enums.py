from __future__ import annotations

from enum import Enum


class ShiftType(str, Enum):
    """Named shift kinds; CUSTOM carries its own start/end."""

    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    CUSTOM = "custom"


class OverrideType(str, Enum):
    """How a single-day override treats the template-derived shift."""

    REPLACE = "replace"
    CANCEL = "cancel"
    OFF_DAY = "off_day"


class ShiftSource(str, Enum):
    """Discriminant of a resolved shift: which store produced it."""

    TEMPLATE = "template"
    OVERRIDE = "override"
    LEAVE = "leave"
    HOLIDAY = "holiday"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventStatus(str, Enum):
    """Status code sent by the attendance device feed."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    BREAK_IN = "break-in"
    BREAK_OUT = "break-out"
    OVERTIME_IN = "overtime-in"
    OVERTIME_OUT = "overtime-out"
    UNSPECIFIED = "unspecified"


class VerifyMode(str, Enum):
    FINGERPRINT = "fingerprint"
    FACE = "face"
    PALM = "palm"
    IRIS = "iris"
    PASSWORD = "password"
    CARD = "card"
    MANUAL = "manual"
    AUTO = "auto"


class Punctuality(str, Enum):
    """Attendance flag codes used on reports."""

    PRESENT = "P"
    DELAYED = "D"
    EXTREME_DELAY = "E"
    HOLIDAY = "H"
    LEAVE = "L"
