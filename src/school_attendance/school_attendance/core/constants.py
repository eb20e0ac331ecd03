"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MIN_ATTENDANCE_PERCENTAGE = 75.0
DEFAULT_EDIT_WINDOW_HOURS = 24
DEFAULT_MONTHLY_SUMMARY_MONTHS = 6
DEFAULT_HISTORY_LIMIT = 200
MIN_PASSWORD_LENGTH = 6
UNMARKED = "unmarked"
DEFAULT_AT_RISK_LIMIT = 10
