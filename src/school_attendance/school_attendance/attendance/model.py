from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one (student, subject, date) observation."""

    attendance_id: int
    student_id: int
    subject_id: int
    date: date
    status: AttendanceStatus
    remarks: Optional[str] = None
    class_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports and history (record joined with names)."""

    attendance_id: int
    student_id: int
    student_name: str
    roll_number: Optional[str]
    class_id: Optional[int]
    class_name: Optional[str]
    subject_id: int
    subject_code: str
    subject_name: str
    date: date
    status: AttendanceStatus
    remarks: Optional[str] = None
