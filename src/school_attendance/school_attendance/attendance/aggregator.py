"""Attendance aggregation.

Pure functions over already-filtered attendance rows: tally statuses per
group and turn the tallies into percentages. Nothing here touches storage.
Rows only need ``student_id``, ``subject_id``, ``class_id``, ``date`` and
``status`` attributes. Services pass the ``AttendanceReportRow`` objects the
repository returns; ``AttendanceRecord`` is the plain entity for callers
that build rows themselves (imports, other stores, tests).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Optional

from ..common.datetime_utils import month_key
from ..core.enums import AttendanceStatus, GroupKey


def attendance_percentage(part: int, total: int) -> float:
    """``part / total * 100`` rounded to 2 decimals, 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(part / total * 100, 2)


def is_low_attendance(percentage: float, threshold: float) -> bool:
    """Strictly below the threshold counts as low; equal does not."""
    return percentage < threshold


@dataclass(frozen=True)
class AttendanceSummary:
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0

    @classmethod
    def from_counter(cls, counter: Counter) -> "AttendanceSummary":
        return cls(
            present_count=int(counter.get(AttendanceStatus.PRESENT, 0)),
            absent_count=int(counter.get(AttendanceStatus.ABSENT, 0)),
            late_count=int(counter.get(AttendanceStatus.LATE, 0)),
        )

    @property
    def total_count(self) -> int:
        return self.present_count + self.absent_count + self.late_count

    @property
    def percentage(self) -> float:
        return attendance_percentage(self.present_count, self.total_count)

    @property
    def absent_percentage(self) -> float:
        return attendance_percentage(self.absent_count, self.total_count)

    @property
    def late_percentage(self) -> float:
        return attendance_percentage(self.late_count, self.total_count)

    def as_dict(self) -> dict:
        return {
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "late_count": self.late_count,
            "total_count": self.total_count,
            "percentage": self.percentage,
            "absent_percentage": self.absent_percentage,
            "late_percentage": self.late_percentage,
        }


EMPTY_SUMMARY = AttendanceSummary()


def _status_of(row: Any) -> Optional[AttendanceStatus]:
    try:
        return AttendanceStatus(getattr(row, "status", None))
    except ValueError:
        return None


def group_key_for(row: Any, group_by: GroupKey) -> Optional[Hashable]:
    """Grouping value of one row, or None when the row lacks the attribute."""
    if group_by == GroupKey.STUDENT:
        return getattr(row, "student_id", None)
    if group_by == GroupKey.SUBJECT:
        return getattr(row, "subject_id", None)
    if group_by == GroupKey.CLASS:
        return getattr(row, "class_id", None)
    if group_by == GroupKey.STUDENT_SUBJECT:
        student_id = getattr(row, "student_id", None)
        subject_id = getattr(row, "subject_id", None)
        if student_id is None or subject_id is None:
            return None
        return (student_id, subject_id)

    day = getattr(row, "date", None)
    if day is None:
        return None
    if group_by == GroupKey.MONTH:
        return month_key(day)
    if group_by == GroupKey.DATE:
        return day
    return None


def aggregate(rows: Iterable[Any], group_by: GroupKey) -> Dict[Hashable, AttendanceSummary]:
    """Tally rows per group.

    Rows without a value for the grouping attribute, or with an unknown
    status, are skipped. The mapping has no defined order.
    """

    tallies: Dict[Hashable, Counter] = {}
    for row in rows:
        status = _status_of(row)
        if status is None:
            continue
        key = group_key_for(row, group_by)
        if key is None:
            continue
        tallies.setdefault(key, Counter())[status] += 1

    return {key: AttendanceSummary.from_counter(counter) for key, counter in tallies.items()}


def summarize(rows: Iterable[Any]) -> AttendanceSummary:
    """Single overall summary; empty input gives the zero summary."""
    counter: Counter = Counter()
    for row in rows:
        status = _status_of(row)
        if status is not None:
            counter[status] += 1
    return AttendanceSummary.from_counter(counter)
