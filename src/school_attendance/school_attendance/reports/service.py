"""Attendance reports.

Every report fetches already-filtered rows from the repository and hands them
to the aggregator; no report computes counts or percentages on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from ..assignments.repository import AssignmentRepository
from ..attendance.aggregator import (
    EMPTY_SUMMARY,
    AttendanceSummary,
    aggregate,
    is_low_attendance,
    summarize,
)
from ..attendance.repository import AttendanceRepository
from ..classes.repository import ClassRepository
from ..common.datetime_utils import month_label
from ..core.constants import (
    DEFAULT_AT_RISK_LIMIT,
    DEFAULT_MIN_ATTENDANCE_PERCENTAGE,
    DEFAULT_MONTHLY_SUMMARY_MONTHS,
)
from ..core.enums import AttendanceStatus, GroupKey, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository


@dataclass(frozen=True)
class StudentOverview:
    student_id: int
    name: str
    class_id: Optional[int]
    overall: AttendanceSummary
    is_low: bool
    subjects: list[dict]
    months: list[dict]


@dataclass(frozen=True)
class AttendanceReport:
    start: date
    end: date
    rows: list[dict]
    summary: dict
    at_risk: list[dict] = field(default_factory=list)


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        assignments: AssignmentRepository,
        classes: ClassRepository,
        *,
        min_percentage: float = DEFAULT_MIN_ATTENDANCE_PERCENTAGE,
        monthly_months: int = DEFAULT_MONTHLY_SUMMARY_MONTHS,
    ):
        self._attendance = attendance
        self._users = users
        self._assignments = assignments
        self._classes = classes
        self._min_percentage = float(min_percentage)
        self._monthly_months = int(monthly_months)

    @property
    def min_percentage(self) -> float:
        return self._min_percentage

    def _is_low(self, summary: AttendanceSummary) -> bool:
        # No records yet is not the same as low attendance.
        return summary.total_count > 0 and is_low_attendance(summary.percentage, self._min_percentage)

    def _summary_fields(self, summary: AttendanceSummary) -> dict:
        out = summary.as_dict()
        out["is_low"] = self._is_low(summary)
        return out

    def student_overview(self, student_id: int) -> StudentOverview:
        student = self._users.get_by_id(int(student_id))
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")

        rows = self._attendance.list_rows(student_id=student.user_id)
        overall = summarize(rows)

        labels: dict[int, tuple[str, str]] = {}
        if student.class_id is not None:
            for s in self._assignments.subjects_for_class(student.class_id):
                labels[s.subject_id] = (s.code, s.name)
        for r in rows:
            labels.setdefault(r.subject_id, (r.subject_code, r.subject_name))

        by_subject = aggregate(rows, GroupKey.SUBJECT)
        subjects = []
        for subject_id, (code, name) in labels.items():
            summary = by_subject.get(subject_id, EMPTY_SUMMARY)
            subjects.append(
                {"subject_id": subject_id, "subject_code": code, "subject_name": name, **self._summary_fields(summary)}
            )
        subjects.sort(key=lambda x: (x["percentage"], x["subject_name"]))

        by_month = aggregate(rows, GroupKey.MONTH)
        months = [
            {"month": key, "month_name": month_label(key), **by_month[key].as_dict()}
            for key in sorted(by_month, reverse=True)[: self._monthly_months]
        ]

        return StudentOverview(
            student_id=student.user_id,
            name=student.name,
            class_id=student.class_id,
            overall=overall,
            is_low=self._is_low(overall),
            subjects=subjects,
            months=months,
        )

    def attendance_report(
        self,
        *,
        start: date,
        end: date,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> AttendanceReport:
        """One row per (student, subject) over [start, end]."""

        if start > end:
            raise ValidationError("Start date must not be after end date")

        rows = self._attendance.list_rows(
            start=start, end=end, class_id=class_id, subject_id=subject_id, teacher_id=teacher_id
        )

        first_seen = {}
        for r in rows:
            first_seen.setdefault((r.student_id, r.subject_id), r)

        out_rows: list[dict] = []
        for key, summary in aggregate(rows, GroupKey.STUDENT_SUBJECT).items():
            r = first_seen[key]
            fields = self._summary_fields(summary)
            out_rows.append(
                {
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "roll_number": r.roll_number or "-",
                    "class_name": r.class_name or "-",
                    "subject_code": r.subject_code,
                    "subject_name": r.subject_name,
                    **fields,
                    "standing": "Low" if fields["is_low"] else "Good",
                }
            )
        out_rows.sort(key=lambda x: (x["class_name"], x["student_name"], x["subject_name"]))

        overall = summarize(rows)
        total_students = len({r.student_id for r in rows})
        summary = {
            "total_students": total_students,
            "present_count": overall.present_count,
            "absent_count": overall.absent_count,
            "late_count": overall.late_count,
            "total_count": overall.total_count,
            "average_days": round(overall.total_count / total_students, 2) if total_students else 0,
            "average_attendance": overall.percentage,
            "min_percentage": self._min_percentage,
        }

        at_risk = sorted((r for r in out_rows if r["is_low"]), key=lambda x: x["percentage"])
        return AttendanceReport(start=start, end=end, rows=out_rows, summary=summary, at_risk=at_risk)

    def class_overview(self, *, on: Optional[date] = None) -> list[dict]:
        """Every class with its summary, optionally for a single day."""

        rows = self._attendance.list_rows(start=on, end=on) if on else self._attendance.list_rows()
        by_class = aggregate(rows, GroupKey.CLASS)

        out = []
        for c in self._classes.list_all():
            summary = by_class.get(c.class_id, EMPTY_SUMMARY)
            out.append(
                {
                    "class_id": c.class_id,
                    "class_name": c.name,
                    "student_count": c.student_count,
                    **self._summary_fields(summary),
                }
            )
        out.sort(key=lambda x: (-x["percentage"], x["class_name"]))
        return out

    def recent_overview(self, *, today: date, days: int = 30) -> AttendanceSummary:
        return summarize(self._attendance.list_rows(start=today - timedelta(days=int(days)), end=today))

    def daily_trend(self, *, start: date, end: date, class_id: Optional[int] = None) -> list[dict]:
        if start > end:
            raise ValidationError("Start date must not be after end date")

        by_day = aggregate(self._attendance.list_rows(start=start, end=end, class_id=class_id), GroupKey.DATE)
        return [{"date": day.strftime("%Y-%m-%d"), **by_day[day].as_dict()} for day in sorted(by_day)]

    def low_attendance_students(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Active students whose overall percentage is below the minimum, lowest first.

        ``teacher_id`` restricts the rows to that teacher's (class, subject)
        assignments. Each entry lists the subjects the student is low in.
        """

        students = {s.user_id: s for s in self._users.list_students(class_id=class_id)}
        rows = self._attendance.list_rows(class_id=class_id, teacher_id=teacher_id)
        class_names = {r.student_id: r.class_name for r in rows}
        subject_labels = {r.subject_id: (r.subject_code, r.subject_name) for r in rows}

        low_subjects: dict[int, list[dict]] = {}
        for (student_id, subject_id), summary in aggregate(rows, GroupKey.STUDENT_SUBJECT).items():
            if not self._is_low(summary):
                continue
            code, name = subject_labels[subject_id]
            low_subjects.setdefault(student_id, []).append(
                {"subject_code": code, "subject_name": name, "percentage": summary.percentage}
            )

        out = []
        for student_id, summary in aggregate(rows, GroupKey.STUDENT).items():
            student = students.get(student_id)
            if student is None or not self._is_low(summary):
                continue
            out.append(
                {
                    "student_id": student.user_id,
                    "student_name": student.name,
                    "email": student.email,
                    "roll_number": student.roll_number or "-",
                    "class_name": class_names.get(student_id) or "-",
                    "parent_name": student.parent_name,
                    "parent_email": student.parent_email,
                    "parent_phone": student.parent_phone,
                    **summary.as_dict(),
                    "low_subjects": sorted(
                        low_subjects.get(student_id, []), key=lambda x: (x["percentage"], x["subject_name"])
                    ),
                }
            )
        out.sort(key=lambda x: (x["percentage"], x["student_name"]))
        return out[:limit] if limit else out

    def at_risk_subjects(self, *, teacher_id: Optional[int] = None, limit: int = DEFAULT_AT_RISK_LIMIT) -> list[dict]:
        """(student, subject) pairs below the minimum over all recorded dates, lowest first."""

        rows = self._attendance.list_rows(teacher_id=teacher_id)
        first_seen = {}
        for r in rows:
            first_seen.setdefault((r.student_id, r.subject_id), r)

        out = []
        for key, summary in aggregate(rows, GroupKey.STUDENT_SUBJECT).items():
            if not self._is_low(summary):
                continue
            r = first_seen[key]
            out.append(
                {
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "roll_number": r.roll_number or "-",
                    "class_name": r.class_name or "-",
                    "subject_code": r.subject_code,
                    "subject_name": r.subject_name,
                    **summary.as_dict(),
                }
            )
        out.sort(key=lambda x: (x["percentage"], x["student_name"], x["subject_name"]))
        return out[: int(limit)]

    def daily_absentees(self, *, on: date) -> list[dict]:
        """Active students absent from at least one subject on ``on``."""

        students = {s.user_id: s for s in self._users.list_students()}
        absent_subjects: dict[int, list[str]] = {}
        class_names: dict[int, Optional[str]] = {}
        for r in self._attendance.list_rows(start=on, end=on):
            class_names[r.student_id] = r.class_name
            if r.status == AttendanceStatus.ABSENT:
                absent_subjects.setdefault(r.student_id, []).append(f"{r.subject_name} ({r.subject_code})")

        out = []
        for student_id, subjects in absent_subjects.items():
            student = students.get(student_id)
            if student is None:
                continue
            out.append(
                {
                    "student_id": student.user_id,
                    "student_name": student.name,
                    "email": student.email,
                    "class_name": class_names.get(student_id) or "-",
                    "parent_email": student.parent_email,
                    "absent_subjects": sorted(subjects),
                }
            )
        out.sort(key=lambda x: x["student_name"])
        return out
