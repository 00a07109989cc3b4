from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "school_attendance")),
    )


@contextmanager
def _connect(db_config: dict, *, with_database: bool = True):
    target = _as_target(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    name = _as_target(db_config).database
    with _connect(db_config, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_line_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    with _connect(db_config) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> None:
    """Seed one school, a teacher with a Grade 11 section and a few students."""
    with _connect(db_config) as conn:
        cur = conn.cursor(dictionary=True)

        cur.execute(
            """
            INSERT INTO teachers (teacher_id, username, password_hash, full_name, school_id, grade_level, section, strand)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE password_hash=VALUES(password_hash), full_name=VALUES(full_name),
                school_id=VALUES(school_id), grade_level=VALUES(grade_level), section=VALUES(section),
                strand=VALUES(strand), is_active=1
            """,
            ("T-001", "teacher", generate_password_hash("teacher123"), "Maria Santos", "SCH-001", 11, "Rizal", "STEM"),
        )

        students = [
            ("S-1001", "Juan Dela Cruz", 11, "Rizal", "STEM"),
            ("S-1002", "Ana Reyes", 11, "Rizal", "STEM"),
            ("S-1003", "Pedro Garcia", 11, "Bonifacio", "ABM"),
        ]
        for student_id, full_name, grade, section, strand in students:
            cur.execute(
                """
                INSERT INTO students (student_id, full_name, grade_level, section, strand, school_id)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), grade_level=VALUES(grade_level),
                    section=VALUES(section), strand=VALUES(strand), school_id=VALUES(school_id), is_active=1
                """,
                (student_id, full_name, grade, section, strand, "SCH-001"),
            )

        cur.execute(
            """
            INSERT INTO subjects (subject_id, subject_name, grade_level, strand, schedule_start, schedule_end)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE subject_name=VALUES(subject_name), grade_level=VALUES(grade_level),
                strand=VALUES(strand), schedule_start=VALUES(schedule_start), schedule_end=VALUES(schedule_end)
            """,
            ("SUB-PHYS11", "General Physics 1", 11, "STEM", "08:00:00", "09:00:00"),
        )
        cur.execute(
            """
            INSERT IGNORE INTO teacher_subjects (teacher_id, subject_id, section)
            VALUES (%s, %s, %s)
            """,
            ("T-001", "SUB-PHYS11", "Rizal"),
        )

        conn.commit()
    logger.info("Demo data ready")


def list_tables(db_config: dict) -> list[str]:
    with _connect(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
