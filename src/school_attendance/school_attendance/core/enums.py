from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for permission checks."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class GroupKey(str, Enum):
    """Grouping granularity for attendance aggregation."""

    STUDENT = "student"
    STUDENT_SUBJECT = "student_subject"
    CLASS = "class"
    SUBJECT = "subject"
    MONTH = "month"
    DATE = "date"
