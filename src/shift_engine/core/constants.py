"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Dhaka"
DEFAULT_GRACE_MINUTES = 10
DEFAULT_TIMESTAMP_TOLERANCE_MINUTES = 5
DEFAULT_DUPLICATE_SCAN_MINUTES = 2

# A check-out this long after a night shift's end still closes that shift.
OVERNIGHT_CHECKOUT_TOLERANCE_MINUTES = 240

# Punctuality: later than this (minutes after shift start) is an extreme delay.
EXTREME_DELAY_MINUTES = 30

# Overtime tiers (minutes of extra work).
OT_MIN_HALF_HOUR = 25
OT_MIN_FULL_HOUR = 55
OT_LINEAR_FROM = 60
OT_BLOCK_MINUTES = 480
OT_BLOCK_CREDIT = 390
OT_LINEAR_RATE = "0.8125"

STANDARD_SHIFTS = {
    "morning": ("07:00", "15:00", False),
    "evening": ("15:00", "23:00", False),
    "night": ("23:00", "07:00", True),
}

# Used when device_id / source_ip are missing (manual or admin entries).
DEFAULT_DEVICE_ID = "SYZ8250800377"
DEFAULT_SOURCE_IP = "::ffff:192.168.10.69"
