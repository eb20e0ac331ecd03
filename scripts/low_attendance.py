"""Print students below the minimum attendance percentage.

Usage: python scripts/low_attendance.py [CLASS_ID]
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "school_attendance"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from school_attendance.main import create_container


def main(argv: list[str]) -> int:
    class_id = int(argv[0]) if argv else None

    container = create_container()
    reports = container.report_service
    students = reports.low_attendance_students(class_id=class_id)

    if not students:
        print(f"OK: No students below {reports.min_percentage:g}%")
        return 0

    print(f"{len(students)} student(s) below {reports.min_percentage:g}%:")
    for s in students:
        parent = s["parent_email"] or s["parent_phone"] or "-"
        print(
            f"  {s['percentage']:6.2f}%  {s['student_name']} ({s['roll_number']}, {s['class_name']})"
            f"  present {s['present_count']}/{s['total_count']}  parent: {parent}"
        )
        for subj in s["low_subjects"]:
            print(f"      {subj['subject_code']} {subj['subject_name']}: {subj['percentage']:.2f}%")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
