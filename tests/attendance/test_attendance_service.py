from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from school_attendance.attendance.model import AttendanceReportRow
from school_attendance.attendance.service import AttendanceService
from school_attendance.core.enums import AttendanceStatus, Role
from school_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from school_attendance.users.model import User

TEACHER_ID = 5
CLASS_ID = 1
MATH = 10


@dataclass
class InMemoryUsers:
    students: list[User]

    def list_students(self, *, class_id: Optional[int] = None, active_only: bool = True):
        return [s for s in self.students if class_id is None or s.class_id == class_id]


@dataclass
class InMemoryAssignments:
    triples: set = field(default_factory=set)

    def exists(self, *, class_id: int, subject_id: int, teacher_id: int) -> bool:
        return (class_id, subject_id, teacher_id) in self.triples


class InMemoryAttendance:
    def __init__(self, students: list[User]):
        self._students = {s.user_id: s for s in students}
        self.rows: dict[int, AttendanceReportRow] = {}
        self._id = 0
        self.last_args = None

    def get_by_id(self, attendance_id: int):
        return self.rows.get(attendance_id)

    def upsert_mark(self, *, student_id, subject_id, on, status, marked_by=None, remarks=None):
        for r in self.rows.values():
            if (r.student_id, r.subject_id, r.date) == (student_id, subject_id, on):
                self.rows[r.attendance_id] = replace(r, status=status)
                return
        self._id += 1
        student = self._students[student_id]
        self.rows[self._id] = AttendanceReportRow(
            attendance_id=self._id,
            student_id=student_id,
            student_name=student.name,
            roll_number=student.roll_number,
            class_id=student.class_id,
            class_name="Grade 10 - A",
            subject_id=subject_id,
            subject_code="MATH101",
            subject_name="Mathematics",
            date=on,
            status=status,
            remarks=remarks,
        )

    def update_record(self, *, attendance_id, status, remarks=None):
        if attendance_id not in self.rows:
            return False
        self.rows[attendance_id] = replace(self.rows[attendance_id], status=status, remarks=remarks)
        return True

    def list_rows(self, *, start=None, end=None, student_id=None, class_id=None, subject_id=None, teacher_id=None, limit=None):
        self.last_args = {"student_id": student_id, "class_id": class_id, "subject_id": subject_id, "teacher_id": teacher_id}
        out = [
            r
            for r in self.rows.values()
            if (start is None or r.date >= start)
            and (end is None or r.date <= end)
            and (student_id is None or r.student_id == student_id)
            and (class_id is None or r.class_id == class_id)
            and (subject_id is None or r.subject_id == subject_id)
        ]
        out.sort(key=lambda r: r.date, reverse=True)
        return out[:limit] if limit else out

    def is_marked(self, *, class_id, subject_id, on):
        return bool(self.list_rows(start=on, end=on, class_id=class_id, subject_id=subject_id))


def student(user_id: int, name: str, class_id: int = CLASS_ID) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=f"{name.lower()}@school.test",
        password_hash="x",
        role=Role.STUDENT,
        class_id=class_id,
        roll_number=f"10A-{user_id:02d}",
    )


@pytest.fixture
def setup():
    students = [student(1, "Asha"), student(2, "Ben"), student(3, "Other", class_id=2)]
    attendance = InMemoryAttendance(students)
    svc = AttendanceService(
        attendance,
        InMemoryUsers(students),
        InMemoryAssignments({(CLASS_ID, MATH, TEACHER_ID)}),
        edit_window_hours=24,
    )
    return svc, attendance


def test_mark_saves_valid_entries_and_skips_the_rest(setup, fixed_now):
    svc, attendance = setup
    today = fixed_now.date()

    result = svc.mark(
        teacher_id=TEACHER_ID,
        class_id=CLASS_ID,
        subject_id=MATH,
        on=today,
        statuses={1: "present", 2: "excused", 3: "present"},
        now=fixed_now,
    )

    assert (result.saved, result.skipped) == (1, 2)
    assert svc.is_marked(class_id=CLASS_ID, subject_id=MATH, on=today) is True
    assert [r.student_id for r in attendance.rows.values()] == [1]


def test_mark_twice_overwrites_instead_of_duplicating(setup, fixed_now):
    svc, attendance = setup
    today = fixed_now.date()

    svc.mark(teacher_id=TEACHER_ID, class_id=CLASS_ID, subject_id=MATH, on=today, statuses={1: "present"}, now=fixed_now)
    svc.mark(teacher_id=TEACHER_ID, class_id=CLASS_ID, subject_id=MATH, on=today, statuses={1: "late"}, now=fixed_now)

    assert len(attendance.rows) == 1
    assert next(iter(attendance.rows.values())).status == AttendanceStatus.LATE


def test_mark_rejects_unassigned_teacher(setup, fixed_now):
    svc, _ = setup
    with pytest.raises(AuthorizationError):
        svc.mark(teacher_id=99, class_id=CLASS_ID, subject_id=MATH, on=fixed_now.date(), statuses={1: "present"}, now=fixed_now)


def test_mark_admin_needs_no_assignment(setup, fixed_now):
    svc, _ = setup
    result = svc.mark(
        teacher_id=1000,
        class_id=CLASS_ID,
        subject_id=MATH,
        on=fixed_now.date(),
        statuses={1: "present"},
        now=fixed_now,
        role=Role.ADMIN,
    )
    assert result.saved == 1


def test_mark_rejects_future_date(setup, fixed_now):
    svc, _ = setup
    with pytest.raises(ValidationError):
        svc.mark(
            teacher_id=TEACHER_ID,
            class_id=CLASS_ID,
            subject_id=MATH,
            on=date(2026, 3, 11),
            statuses={1: "present"},
            now=fixed_now,
        )


def test_mark_does_not_overwrite_closed_records(setup, fixed_now):
    svc, attendance = setup
    old = date(2026, 3, 1)
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=old, status=AttendanceStatus.ABSENT)

    result = svc.mark(
        teacher_id=TEACHER_ID,
        class_id=CLASS_ID,
        subject_id=MATH,
        on=old,
        statuses={1: "present", 2: "present"},
        now=fixed_now,
    )

    assert (result.saved, result.skipped) == (1, 1)
    assert attendance.get_by_id(1).status == AttendanceStatus.ABSENT


def test_roster_lists_class_students_with_status(setup, fixed_now):
    svc, _ = setup
    today = fixed_now.date()
    svc.mark(teacher_id=TEACHER_ID, class_id=CLASS_ID, subject_id=MATH, on=today, statuses={2: "absent"}, now=fixed_now)

    roster = svc.roster(teacher_id=TEACHER_ID, class_id=CLASS_ID, subject_id=MATH, on=today)

    assert [(e.student_id, e.status) for e in roster] == [(1, "unmarked"), (2, "absent")]


def test_update_inside_window(setup, fixed_now):
    svc, attendance = setup
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=fixed_now.date(), status=AttendanceStatus.ABSENT)

    svc.update(
        current_user_id=TEACHER_ID,
        current_role=Role.TEACHER,
        attendance_id=1,
        status="Late",
        remarks="  bus  ",
        now=fixed_now,
    )

    row = attendance.get_by_id(1)
    assert row.status == AttendanceStatus.LATE
    assert row.remarks == "bus"


def test_update_refused_after_window_but_allowed_for_admin(setup, fixed_now):
    svc, attendance = setup
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=date(2026, 3, 8), status=AttendanceStatus.ABSENT)

    with pytest.raises(AuthorizationError):
        svc.update(current_user_id=TEACHER_ID, current_role=Role.TEACHER, attendance_id=1, status="present", now=fixed_now)

    svc.update(current_user_id=1000, current_role=Role.ADMIN, attendance_id=1, status="present", now=fixed_now)
    assert attendance.get_by_id(1).status == AttendanceStatus.PRESENT


def test_update_checks_ownership_status_and_existence(setup, fixed_now):
    svc, attendance = setup
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=fixed_now.date(), status=AttendanceStatus.ABSENT)

    with pytest.raises(AuthorizationError):
        svc.update(current_user_id=77, current_role=Role.TEACHER, attendance_id=1, status="present", now=fixed_now)
    with pytest.raises(AuthorizationError):
        svc.update(current_user_id=1, current_role=Role.STUDENT, attendance_id=1, status="present", now=fixed_now)
    with pytest.raises(ValidationError):
        svc.update(current_user_id=TEACHER_ID, current_role=Role.TEACHER, attendance_id=1, status="maybe", now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.update(current_user_id=TEACHER_ID, current_role=Role.TEACHER, attendance_id=42, status="present", now=fixed_now)


def test_bulk_update_counts_refusals(setup, fixed_now):
    svc, attendance = setup
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=fixed_now.date(), status=AttendanceStatus.ABSENT, remarks="sick")
    attendance.upsert_mark(student_id=2, subject_id=MATH, on=date(2026, 3, 1), status=AttendanceStatus.ABSENT)

    result = svc.bulk_update(
        current_user_id=TEACHER_ID,
        current_role=Role.TEACHER,
        attendance_ids=[1, 2, 99],
        status="present",
        remarks="",
        now=fixed_now,
    )

    assert (result.updated, result.refused) == (1, 2)
    assert attendance.get_by_id(1).status == AttendanceStatus.PRESENT
    assert attendance.get_by_id(1).remarks == "sick"


def test_history_flags_editable_rows(setup, fixed_now):
    svc, attendance = setup
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=date(2026, 3, 1), status=AttendanceStatus.PRESENT)
    attendance.upsert_mark(student_id=1, subject_id=MATH, on=fixed_now.date(), status=AttendanceStatus.ABSENT)

    items = svc.history(user_id=TEACHER_ID, role=Role.TEACHER, now=fixed_now)

    assert [i["date"] for i in items] == ["2026-03-10", "2026-03-01"]
    assert [i["editable"] for i in items] == [True, False]
    assert items[0]["status"] == "Absent"
    assert items[0]["css_class"] == "bg-danger"

    own = svc.history(user_id=1, role=Role.STUDENT, now=fixed_now)
    assert all(i["editable"] is False for i in own)


def test_mark_skips_non_numeric_student_ids(setup, fixed_now):
    svc, attendance = setup

    result = svc.mark(
        teacher_id=TEACHER_ID,
        class_id=CLASS_ID,
        subject_id=MATH,
        on=fixed_now.date(),
        statuses={"abc": "present", "2": "present"},
        now=fixed_now,
    )

    assert (result.saved, result.skipped) == (1, 1)
    assert [r.student_id for r in attendance.rows.values()] == [2]


def test_history_scopes_rows_by_role(setup, fixed_now):
    svc, attendance = setup

    svc.history(user_id=TEACHER_ID, role=Role.TEACHER, class_id=CLASS_ID, now=fixed_now)
    assert attendance.last_args["teacher_id"] == TEACHER_ID
    assert attendance.last_args["class_id"] == CLASS_ID

    svc.history(user_id=1000, role=Role.ADMIN, now=fixed_now)
    assert attendance.last_args["teacher_id"] is None

    svc.history(user_id=1, role=Role.STUDENT, now=fixed_now)
    assert attendance.last_args["student_id"] == 1
    assert attendance.last_args["teacher_id"] is None
