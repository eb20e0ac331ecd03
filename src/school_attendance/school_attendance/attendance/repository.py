from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceReportRow]:
        raise NotImplementedError

    def upsert_mark(
        self,
        *,
        student_id: int,
        subject_id: int,
        on: date,
        status: AttendanceStatus,
        marked_by: Optional[int] = None,
        remarks: Optional[str] = None,
    ) -> None:
        """Insert the mark or overwrite the existing one for (student, subject, date)."""

        raise NotImplementedError

    def update_record(self, *, attendance_id: int, status: AttendanceStatus, remarks: Optional[str] = None) -> bool:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Rows matching every given filter, newest date first.

        ``teacher_id`` keeps only rows whose (class, subject) is assigned to
        that teacher.
        """

        raise NotImplementedError

    def is_marked(self, *, class_id: int, subject_id: int, on: date) -> bool:
        raise NotImplementedError
