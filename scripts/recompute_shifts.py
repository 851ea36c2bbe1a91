#!/usr/bin/env python3
"""Nightly shift recomputation: refresh shift_resolved for a date range.

Each employee-day is upserted on its own, so a failed run can simply be
rerun with the same arguments.

Usage:
    python scripts/recompute_shifts.py                               # today .. +7 days
    python scripts/recompute_shifts.py --from 2026-02-01 --to 2026-02-29
    python scripts/recompute_shifts.py --employee E001 --employee E002
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta

from dotenv import load_dotenv

from shift_engine.common.datetime_utils import LocalClock, parse_iso_date
from shift_engine.config import EngineSettings, get_settings_module, load_settings
from shift_engine.container import build_container
from shift_engine.core.exceptions import ValidationError
from shift_engine.main import configure_logging
from shift_engine.shifts.mysql_shift_repository import MySQLShiftTemplateRepository

logger = logging.getLogger("recompute_shifts")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Recompute resolved shifts for a date range",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --days 14
  %(prog)s --from 2026-02-01 --to 2026-02-29 --employee E001
        """,
    )
    parser.add_argument("--from", dest="from_date", type=str, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="to_date", type=str, help="End date (YYYY-MM-DD)")
    parser.add_argument("--days", type=int, default=7,
                        help="Days ahead of today (default: 7, ignored if --from/--to set)")
    parser.add_argument("--employee", dest="employees", action="append", default=[],
                        help="Employee id (repeatable; default: everyone with an active template)")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = load_settings(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    engine_settings = EngineSettings.from_module(settings)

    try:
        today = LocalClock(engine_settings.timezone).now().date()
        start = parse_iso_date(args.from_date) if args.from_date else today
        end = parse_iso_date(args.to_date) if args.to_date else start + timedelta(days=args.days)
    except ValidationError as e:
        parser.error(str(e))

    container = build_container(db_config=settings.DB_CONFIG, settings=engine_settings)
    employee_ids = args.employees or list(
        MySQLShiftTemplateRepository(container.conn).list_employee_ids(start=start, end=end)
    )
    if not employee_ids:
        logger.info("No employees with active templates in %s..%s", start, end)
        return 0

    logger.info("Recomputing %d employee(s) %s..%s", len(employee_ids), start, end)
    summary = container.resolver.recompute(employee_ids, start, end)
    return 1 if summary.conflicts else 0


if __name__ == "__main__":
    sys.exit(main())
