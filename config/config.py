"""Settings shared by every environment module."""

import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_system"),
}

SITE_NAME = os.getenv("SITE_NAME", "Student Attendance Management System")

# Hours after a record's date during which teachers may still edit it.
ATTENDANCE_EDIT_HOURS = int(os.getenv("ATTENDANCE_EDIT_HOURS", "24"))

# Students strictly below this percentage are flagged as low attendance.
MIN_ATTENDANCE_PERCENTAGE = float(os.getenv("MIN_ATTENDANCE_PERCENTAGE", "75"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
