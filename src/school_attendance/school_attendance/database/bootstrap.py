from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _as_target(db_config: dict) -> DBConfig:
    return DBConfig.from_mapping(db_config)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Yield the ';'-terminated statements of a schema/seed script.

    Semicolons inside single- or double-quoted literals do not split, and a
    backslash escapes the next character.
    """

    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if ch == "\\":
            i += 2
            continue
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> int:
    count = 0
    for stmt in iter_sql_statements(_strip_line_comments(sql)):
        cur.execute(stmt)
        count += 1
    return count


def _apply_sql_file(db_config: dict, path: Path) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = _exec_sql(cur, sql)
        conn.commit()
        logger.info("applied %s (%d statements) to %s", path.name, count, target.database)
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _apply_sql_file(db_config, Path(schema_path))


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _apply_sql_file(db_config, Path(seed_path))


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) the demo admin/teacher/student accounts.

    Expects seed.sql to have created the demo class and subject.
    """

    target = _as_target(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        id_col_map = {
            "classes": "class_id",
            "subjects": "subject_id",
            "users": "user_id",
        }

        def get_id(table: str, col: str, value: str) -> int:
            id_col = id_col_map.get(table)
            if not id_col:
                raise RuntimeError(f"Unsupported lookup table: {table}")
            cur.execute(f"SELECT {id_col} AS id FROM {table} WHERE {col}=%s", (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing {table} row for {col}={value}")
            return int(row["id"])

        class_10a = get_id("classes", "name", "Grade 10 - A")
        math = get_id("subjects", "code", "MATH101")

        def upsert_user(
            name: str,
            email: str,
            password: str,
            role: str,
            class_id: Optional[int] = None,
            roll_number: Optional[str] = None,
        ) -> int:
            password_hash = generate_password_hash(password)
            cur.execute(
                """
                INSERT INTO users (name, email, password_hash, role, status, class_id, roll_number)
                VALUES (%s, %s, %s, %s, 'active', %s, %s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), password_hash=VALUES(password_hash), role=VALUES(role),
                    status='active', class_id=VALUES(class_id), roll_number=VALUES(roll_number)
                """,
                (name, email, password_hash, role, class_id, roll_number),
            )
            return get_id("users", "email", email)

        upsert_user("Admin Demo", "admin@school.test", "admin123", "admin")
        teacher_id = upsert_user("Teacher Demo", "teacher@school.test", "teacher123", "teacher")
        upsert_user("Student Demo", "student@school.test", "student123", "student", class_10a, "10A-01")

        cur.execute(
            """
            INSERT IGNORE INTO class_subjects (class_id, subject_id, teacher_id)
            VALUES (%s, %s, %s)
            """,
            (class_10a, math, teacher_id),
        )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
