import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_engine"),
}

TIMEZONE = os.getenv("TIMEZONE", "Asia/Dhaka")
GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "10"))
TIMESTAMP_TOLERANCE_MINUTES = int(os.getenv("TIMESTAMP_TOLERANCE_MINUTES", "5"))
DUPLICATE_SCAN_MINUTES = int(os.getenv("DUPLICATE_SCAN_MINUTES", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
