from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AccountStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetch_count, fetchall, fetchone, optional_int
from .model import StudentProfile, User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, email, password_hash, role, status,
    class_id, roll_number, parent_name, parent_phone, parent_email
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        status=AccountStatus(row.get("status") or AccountStatus.ACTIVE.value),
        class_id=optional_int(row.get("class_id")),
        roll_number=row.get("roll_number"),
        parent_name=row.get("parent_name"),
        parent_phone=row.get("parent_phone"),
        parent_email=row.get("parent_email"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        status: AccountStatus,
        profile: StudentProfile,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, status,
                                  class_id, roll_number, parent_name, parent_phone, parent_email)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    name,
                    email,
                    password_hash,
                    role.value,
                    status.value,
                    profile.class_id,
                    profile.roll_number,
                    profile.parent_name,
                    profile.parent_phone,
                    profile.parent_email,
                ),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        role: Role,
        status: AccountStatus,
        profile: StudentProfile,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, email=%s, role=%s, status=%s,
                    class_id=%s, roll_number=%s, parent_name=%s, parent_phone=%s, parent_email=%s
                WHERE user_id=%s
                """,
                (
                    name,
                    email,
                    role.value,
                    status.value,
                    profile.class_id,
                    profile.roll_number,
                    profile.parent_name,
                    profile.parent_phone,
                    profile.parent_email,
                    int(user_id),
                ),
            )
            return cur.rowcount > 0

    def update_password(self, *, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def set_status(self, *, user_id: int, status: AccountStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE user_id=%s", (status.value, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        clauses: list[str] = []
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE {build_where(clauses)} ORDER BY role, name",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_students(self, *, class_id: Optional[int] = None, active_only: bool = True) -> Sequence[User]:
        clauses = ["role='student'"]
        params: list[object] = []
        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(class_id))
        if active_only:
            clauses.append("status='active'")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE {build_where(clauses)} ORDER BY roll_number, name",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def count_in_class(self, class_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE class_id=%s", (int(class_id),))
            return fetch_count(cur)
