from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetch_count, fetchall, fetchone, optional_int
from .model import AttendanceReportRow
from .repository import AttendanceRepository

_ROW_SELECT = """
    SELECT
        a.attendance_id, a.student_id, a.subject_id, a.date, a.status, a.remarks,
        u.name AS student_name, u.roll_number, u.class_id,
        c.name AS class_name,
        s.code AS subject_code, s.name AS subject_name
    FROM attendance a
    JOIN users u ON u.user_id = a.student_id
    JOIN subjects s ON s.subject_id = a.subject_id
    LEFT JOIN classes c ON c.class_id = u.class_id
"""


def _to_row(r: dict) -> AttendanceReportRow:
    return AttendanceReportRow(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        roll_number=r.get("roll_number"),
        class_id=optional_int(r.get("class_id")),
        class_name=r.get("class_name"),
        subject_id=int(r["subject_id"]),
        subject_code=r["subject_code"],
        subject_name=r["subject_name"],
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ROW_SELECT + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_row(r) if r else None

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
        # Single statement against uq_attendance_student_subject_date: no read-then-write gap.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, subject_id, date, status, remarks, marked_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    remarks=COALESCE(VALUES(remarks), remarks),
                    marked_by=VALUES(marked_by)
                """,
                (int(student_id), int(subject_id), on, status.value, remarks, marked_by),
            )

    def update_record(self, *, attendance_id: int, status: AttendanceStatus, remarks: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET status=%s, remarks=%s WHERE attendance_id=%s",
                (status.value, remarks, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        clauses: list[str] = []
        params: list[object] = []

        if start is not None:
            clauses.append("a.date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("a.date <= %s")
            params.append(end)
        if student_id is not None:
            clauses.append("a.student_id=%s")
            params.append(int(student_id))
        if class_id is not None:
            clauses.append("u.class_id=%s")
            params.append(int(class_id))
        if subject_id is not None:
            clauses.append("a.subject_id=%s")
            params.append(int(subject_id))
        if teacher_id is not None:
            clauses.append(
                """
                EXISTS (
                    SELECT 1 FROM class_subjects cs
                    WHERE cs.class_id = u.class_id AND cs.subject_id = a.subject_id AND cs.teacher_id=%s
                )
                """
            )
            params.append(int(teacher_id))

        sql = _ROW_SELECT + f" WHERE {build_where(clauses)} ORDER BY a.date DESC, c.name ASC, u.name ASC, s.name ASC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_row(r) for r in fetchall(cur)]

    def is_marked(self, *, class_id: int, subject_id: int, on: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance a
                JOIN users u ON u.user_id = a.student_id
                WHERE u.class_id=%s AND a.subject_id=%s AND a.date=%s
                """,
                (int(class_id), int(subject_id), on),
            )
            return fetch_count(cur) > 0
