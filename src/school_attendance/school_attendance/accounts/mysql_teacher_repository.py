from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import TeacherAccount
from .repository import TeacherRepository

_COLUMNS = "teacher_id, username, password_hash, full_name, school_id, grade_level, section, strand, is_active"


def _to_account(row: dict) -> TeacherAccount:
    return TeacherAccount(
        teacher_id=str(row["teacher_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        school_id=str(row["school_id"]),
        grade_level=int(row.get("grade_level") or 0),
        section=row.get("section") or "",
        strand=row.get("strand"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[TeacherAccount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_username(self, username: str) -> Optional[TeacherAccount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_account(row) if row else None
