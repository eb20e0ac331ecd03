from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=int(r["subject_id"]),
        code=r["code"],
        name=r["name"],
        description=r.get("description"),
        class_count=int(r.get("class_count") or 0),
        teacher_count=int(r.get("teacher_count") or 0),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, code, name, description FROM subjects WHERE subject_id=%s", (int(subject_id),))
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def get_by_code(self, code: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, code, name, description FROM subjects WHERE code=%s", (code,))
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.subject_id, s.code, s.name, s.description,
                       (SELECT COUNT(DISTINCT cs.class_id) FROM class_subjects cs WHERE cs.subject_id = s.subject_id) AS class_count,
                       (SELECT COUNT(DISTINCT cs.teacher_id) FROM class_subjects cs WHERE cs.subject_id = s.subject_id) AS teacher_count
                FROM subjects s
                ORDER BY s.name
                """
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def create(self, *, code: str, name: str, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO subjects(code, name, description) VALUES(%s,%s,%s)", (code, name, description))
            return int(cur.lastrowid)

    def update(self, *, subject_id: int, code: str, name: str, description: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subjects SET code=%s, name=%s, description=%s WHERE subject_id=%s",
                (code, name, description, int(subject_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (int(subject_id),))
            return cur.rowcount > 0
