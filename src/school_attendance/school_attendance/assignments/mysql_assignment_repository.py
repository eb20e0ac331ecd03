from __future__ import annotations

from typing import Optional, Sequence

from ..classes.model import SchoolClass
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetch_count, fetchall, fetchone
from ..subjects.model import Subject
from .model import Assignment, AssignmentView
from .repository import AssignmentRepository


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, class_id: int, subject_id: int, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO class_subjects(class_id, subject_id, teacher_id) VALUES(%s,%s,%s)",
                (int(class_id), int(subject_id), int(teacher_id)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT assignment_id, class_id, subject_id, teacher_id FROM class_subjects WHERE assignment_id=%s",
                (int(assignment_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Assignment(
                assignment_id=int(r["assignment_id"]),
                class_id=int(r["class_id"]),
                subject_id=int(r["subject_id"]),
                teacher_id=int(r["teacher_id"]),
            )

    def exists(self, *, class_id: int, subject_id: int, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n FROM class_subjects
                WHERE class_id=%s AND subject_id=%s AND teacher_id=%s
                """,
                (int(class_id), int(subject_id), int(teacher_id)),
            )
            return fetch_count(cur) > 0

    def delete(self, *, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_subjects WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0

    def list_all(self, *, teacher_id: Optional[int] = None) -> Sequence[AssignmentView]:
        clauses: list[str] = []
        params: list[object] = []
        if teacher_id is not None:
            clauses.append("cs.teacher_id=%s")
            params.append(int(teacher_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT cs.assignment_id,
                       c.class_id, c.name AS class_name,
                       s.subject_id, s.code AS subject_code, s.name AS subject_name,
                       u.user_id AS teacher_id, u.name AS teacher_name
                FROM class_subjects cs
                JOIN classes c ON c.class_id = cs.class_id
                JOIN subjects s ON s.subject_id = cs.subject_id
                JOIN users u ON u.user_id = cs.teacher_id
                WHERE {build_where(clauses)}
                ORDER BY c.name, s.name, u.name
                """,
                tuple(params),
            )
            return [
                AssignmentView(
                    assignment_id=int(r["assignment_id"]),
                    class_id=int(r["class_id"]),
                    class_name=r["class_name"],
                    subject_id=int(r["subject_id"]),
                    subject_code=r["subject_code"],
                    subject_name=r["subject_name"],
                    teacher_id=int(r["teacher_id"]),
                    teacher_name=r["teacher_name"],
                )
                for r in fetchall(cur)
            ]

    def classes_for_teacher(self, teacher_id: int) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT c.class_id, c.name, c.description
                FROM classes c
                JOIN class_subjects cs ON cs.class_id = c.class_id
                WHERE cs.teacher_id=%s
                ORDER BY c.name
                """,
                (int(teacher_id),),
            )
            return [
                SchoolClass(class_id=int(r["class_id"]), name=r["name"], description=r.get("description"))
                for r in fetchall(cur)
            ]

    def subjects_for_teacher(self, teacher_id: int, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        clauses = ["cs.teacher_id=%s"]
        params: list[object] = [int(teacher_id)]
        if class_id is not None:
            clauses.append("cs.class_id=%s")
            params.append(int(class_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT s.subject_id, s.code, s.name, s.description
                FROM subjects s
                JOIN class_subjects cs ON cs.subject_id = s.subject_id
                WHERE {build_where(clauses)}
                ORDER BY s.name
                """,
                tuple(params),
            )
            return [
                Subject(subject_id=int(r["subject_id"]), code=r["code"], name=r["name"], description=r.get("description"))
                for r in fetchall(cur)
            ]

    def subjects_for_class(self, class_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT s.subject_id, s.code, s.name, s.description
                FROM subjects s
                JOIN class_subjects cs ON cs.subject_id = s.subject_id
                WHERE cs.class_id=%s
                ORDER BY s.name
                """,
                (int(class_id),),
            )
            return [
                Subject(subject_id=int(r["subject_id"]), code=r["code"], name=r["name"], description=r.get("description"))
                for r in fetchall(cur)
            ]

    def count_for_subject(self, subject_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM class_subjects WHERE subject_id=%s", (int(subject_id),))
            return fetch_count(cur)
