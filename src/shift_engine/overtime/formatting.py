from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_ot(minutes: int) -> str:
    """Minutes as ``H:MM`` (e.g. 90 -> ``1:30``)."""
    minutes = max(int(minutes or 0), 0)
    return f"{minutes // 60}:{minutes % 60:02d}"


def ot_in_hours(minutes: int) -> Decimal:
    """Minutes as decimal hours with two places (e.g. 90 -> ``1.50``)."""
    minutes = max(int(minutes or 0), 0)
    return (Decimal(minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
