from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        name=r["name"],
        description=r.get("description"),
        student_count=int(r.get("student_count") or 0),
        subject_count=int(r.get("subject_count") or 0),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name, description FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def get_by_name(self, name: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name, description FROM classes WHERE name=%s", (name,))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.class_id, c.name, c.description,
                       (SELECT COUNT(*) FROM users u WHERE u.class_id = c.class_id AND u.role = 'student') AS student_count,
                       (SELECT COUNT(*) FROM class_subjects cs WHERE cs.class_id = c.class_id) AS subject_count
                FROM classes c
                ORDER BY c.name
                """
            )
            return [_to_class(r) for r in fetchall(cur)]

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO classes(name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update(self, *, class_id: int, name: str, description: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET name=%s, description=%s WHERE class_id=%s",
                (name, description, int(class_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE class_id=%s", (int(class_id),))
            return cur.rowcount > 0
