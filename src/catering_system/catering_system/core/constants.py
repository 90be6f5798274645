"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# Retries applied by the MySQL layer on deadlock / lock wait timeout.
CONFLICT_RETRIES = 1

# mysql-connector errno values treated as transient write conflicts.
MYSQL_DEADLOCK_ERRNO = 1213
MYSQL_LOCK_WAIT_TIMEOUT_ERRNO = 1205

SUMMARY_CSV_FIELDS = ("student_id", "first_name", "last_name", "group", "attended_days")
