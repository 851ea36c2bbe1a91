"""Apply schema.sql to the database selected by APP_ENV.

Usage:
    APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from shift_engine.config import get_settings_module, load_settings
from shift_engine.database.bootstrap import apply_schema, list_tables
from shift_engine.main import configure_logging

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
