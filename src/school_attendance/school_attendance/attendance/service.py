from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from ..assignments.repository import AssignmentRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, parse_status
from ..core.constants import DEFAULT_EDIT_WINDOW_HOURS, DEFAULT_HISTORY_LIMIT, UNMARKED
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .factory import EditPolicyFactory
from .model import AttendanceReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

STATUS_CSS = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.ABSENT: "bg-danger",
    AttendanceStatus.LATE: "bg-warning text-dark",
}


@dataclass(frozen=True)
class RosterEntry:
    student_id: int
    name: str
    roll_number: Optional[str]
    status: str
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class MarkResult:
    saved: int
    skipped: int


@dataclass(frozen=True)
class BulkUpdateResult:
    updated: int
    refused: int


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        assignments: AssignmentRepository,
        *,
        policy_factory: Optional[EditPolicyFactory] = None,
        edit_window_hours: int = DEFAULT_EDIT_WINDOW_HOURS,
    ):
        self._attendance = attendance
        self._users = users
        self._assignments = assignments
        self._policies = policy_factory or EditPolicyFactory(window_hours=int(edit_window_hours))

    def _require_assignment(self, *, role: Role, teacher_id: int, class_id: int, subject_id: int) -> None:
        if role == Role.ADMIN:
            return
        if role != Role.TEACHER or not self._assignments.exists(
            class_id=int(class_id), subject_id=int(subject_id), teacher_id=int(teacher_id)
        ):
            raise AuthorizationError("You are not assigned to this class and subject")

    def roster(
        self,
        *,
        teacher_id: int,
        class_id: int,
        subject_id: int,
        on: date,
        role: Role = Role.TEACHER,
    ) -> list[RosterEntry]:
        """Active students of the class with their status for ``on``."""

        self._require_assignment(role=role, teacher_id=teacher_id, class_id=class_id, subject_id=subject_id)

        marked = {
            r.student_id: r
            for r in self._attendance.list_rows(start=on, end=on, class_id=int(class_id), subject_id=int(subject_id))
        }

        out: list[RosterEntry] = []
        for student in self._users.list_students(class_id=int(class_id)):
            row = marked.get(student.user_id)
            out.append(
                RosterEntry(
                    student_id=student.user_id,
                    name=student.name,
                    roll_number=student.roll_number,
                    status=row.status.value if row else UNMARKED,
                    attendance_id=row.attendance_id if row else None,
                )
            )
        return out

    def mark(
        self,
        *,
        teacher_id: int,
        class_id: int,
        subject_id: int,
        on: date,
        statuses: Mapping[int, str],
        now: Optional[datetime] = None,
        role: Role = Role.TEACHER,
    ) -> MarkResult:
        """Record one status per student for (class, subject, on).

        Entries with a non-numeric student id or an unknown status, for
        students outside the class, or overwriting a record whose edit window
        has closed are skipped.
        """

        now = now or now_local()
        self._require_assignment(role=role, teacher_id=teacher_id, class_id=class_id, subject_id=subject_id)

        if on > now.date():
            raise ValidationError("Cannot mark attendance for future dates")

        enrolled = {s.user_id for s in self._users.list_students(class_id=int(class_id))}
        existing = {
            r.student_id
            for r in self._attendance.list_rows(start=on, end=on, class_id=int(class_id), subject_id=int(subject_id))
        }
        can_overwrite = self._policies.for_role(role).allows(record_date=on, now=now)

        saved = 0
        skipped = 0
        for raw_student_id, raw_status in statuses.items():
            try:
                student_id = int(raw_student_id)
                status = parse_status(raw_status)
            except (TypeError, ValueError, ValidationError):
                skipped += 1
                continue

            if student_id not in enrolled or (student_id in existing and not can_overwrite):
                skipped += 1
                continue

            self._attendance.upsert_mark(
                student_id=student_id,
                subject_id=int(subject_id),
                on=on,
                status=status,
                marked_by=int(teacher_id),
            )
            saved += 1

        logger.info(
            "attendance marked class=%s subject=%s date=%s saved=%d skipped=%d by=%s",
            class_id,
            subject_id,
            on.isoformat(),
            saved,
            skipped,
            teacher_id,
        )
        return MarkResult(saved=saved, skipped=skipped)

    def _check_can_amend(self, row: AttendanceReportRow, *, user_id: int, role: Role, now: datetime) -> None:
        if role == Role.STUDENT:
            raise AuthorizationError("You do not have permission to edit attendance")

        if role == Role.TEACHER and (
            row.class_id is None
            or not self._assignments.exists(class_id=row.class_id, subject_id=row.subject_id, teacher_id=int(user_id))
        ):
            raise AuthorizationError("You do not have permission to edit this attendance record")

        if not self._policies.for_role(role).allows(record_date=row.date, now=now):
            raise AuthorizationError("The edit window for this record has closed")

    def _get_row(self, attendance_id: int) -> AttendanceReportRow:
        row = self._attendance.get_by_id(int(attendance_id))
        if not row:
            raise NotFoundError("Attendance record not found")
        return row

    def update(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        attendance_id: int,
        status: str,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        now = now or now_local()
        new_status = parse_status(status)
        row = self._get_row(attendance_id)
        self._check_can_amend(row, user_id=current_user_id, role=current_role, now=now)

        if not self._attendance.update_record(
            attendance_id=row.attendance_id, status=new_status, remarks=optional_text(remarks)
        ):
            raise ValidationError("Failed to update attendance record")

    def bulk_update(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        attendance_ids: Iterable[int],
        status: str,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BulkUpdateResult:
        """Apply one status to many records; empty remarks keep each record's own."""

        now = now or now_local()
        new_status = parse_status(status)
        new_remarks = optional_text(remarks)

        updated = 0
        refused = 0
        for attendance_id in attendance_ids:
            try:
                row = self._get_row(attendance_id)
                self._check_can_amend(row, user_id=current_user_id, role=current_role, now=now)
            except (NotFoundError, AuthorizationError):
                refused += 1
                continue

            if self._attendance.update_record(
                attendance_id=row.attendance_id,
                status=new_status,
                remarks=new_remarks if new_remarks is not None else row.remarks,
            ):
                updated += 1
            else:
                refused += 1

        return BulkUpdateResult(updated=updated, refused=refused)

    def history(
        self,
        *,
        user_id: int,
        role: Role = Role.TEACHER,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[dict]:
        """Records the user may see, newest first, with an ``editable`` flag."""

        now = now or now_local()
        if role == Role.STUDENT:
            rows = self._attendance.list_rows(
                student_id=int(user_id), subject_id=subject_id, start=start, end=end, limit=limit
            )
        else:
            rows = self._attendance.list_rows(
                teacher_id=None if role == Role.ADMIN else int(user_id),
                class_id=class_id,
                subject_id=subject_id,
                start=start,
                end=end,
                limit=limit,
            )

        policy = self._policies.for_role(role)
        return [
            self._to_ui(r, editable=role != Role.STUDENT and policy.allows(record_date=r.date, now=now))
            for r in rows
        ]

    def is_marked(self, *, class_id: int, subject_id: int, on: date) -> bool:
        return self._attendance.is_marked(class_id=int(class_id), subject_id=int(subject_id), on=on)

    def _to_ui(self, r: AttendanceReportRow, *, editable: bool) -> dict:
        return {
            "attendance_id": r.attendance_id,
            "date": r.date.strftime("%Y-%m-%d"),
            "student_id": r.student_id,
            "student_name": r.student_name,
            "roll_number": r.roll_number or "-",
            "class_name": r.class_name or "-",
            "subject": f"{r.subject_name} ({r.subject_code})",
            "status": r.status.value.capitalize(),
            "css_class": STATUS_CSS.get(r.status, "bg-secondary"),
            "remarks": r.remarks or "",
            "editable": editable,
        }
