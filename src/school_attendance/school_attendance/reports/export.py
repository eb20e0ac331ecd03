from __future__ import annotations

import csv
import io

from .service import AttendanceReport

REPORT_CSV_FIELDS = [
    "class_name",
    "student_name",
    "roll_number",
    "subject_code",
    "subject_name",
    "present_count",
    "absent_count",
    "late_count",
    "total_count",
    "percentage",
    "standing",
]


def report_to_csv(report: AttendanceReport) -> bytes:
    """Report rows as CSV bytes (UTF-8 with BOM so spreadsheets detect the encoding)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for row in report.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def report_filename(report: AttendanceReport, *, prefix: str = "attendance_report") -> str:
    return f"{prefix}_{report.start.strftime('%Y%m%d')}_{report.end.strftime('%Y%m%d')}.csv"
