"""Constants and defaults.

Note: Keep school-hour thresholds here to avoid magic numbers spread across code.
"""

from datetime import time, timedelta

# Time-in after this is late (strictly greater).
DEFAULT_SCHOOL_START = time(7, 30)
# Time-out remarks treat a time-in at or after this as late.
TIME_OUT_LATE_FROM = time(7, 31)
# Whole day: time-in hour at most this and time-out hour at least WHOLE_DAY_OUT_HOUR.
WHOLE_DAY_IN_HOUR = 7
WHOLE_DAY_OUT_HOUR = 16

# Offline reconciliation thresholds.
SYNC_FULL_DAY_DURATION = timedelta(hours=4)
SYNC_LATE_AFTER_HOUR = 8

UNKNOWN = "Unknown"
QR_DELIMITER = "|"
QR_MIN_DELIMITED_FIELDS = 5

DEFAULT_HISTORY_DAYS = 30
DEFAULT_MAX_CONNECTIONS = 3
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_HEALTH_TIMEOUT_SECONDS = 5
DEFAULT_SYNC_TIMEOUT_SECONDS = 30

TIME_FORMAT = "%H:%M"
TIME_WITH_SECONDS_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
