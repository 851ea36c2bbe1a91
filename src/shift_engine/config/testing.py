import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_engine_test"),
}

TIMEZONE = "Asia/Dhaka"
GRACE_MINUTES = 10
TIMESTAMP_TOLERANCE_MINUTES = 5
DUPLICATE_SCAN_MINUTES = 2

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
