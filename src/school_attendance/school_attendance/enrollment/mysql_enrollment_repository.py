from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Student, Subject, TeacherAssignment
from .repository import EnrollmentRepository

_STUDENT_COLUMNS = "s.student_id, s.full_name, s.grade_level, s.section, s.strand, s.school_id, s.is_active"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["student_id"]),
        full_name=row["full_name"],
        grade_level=int(row.get("grade_level") or 0),
        section=row.get("section") or "",
        school_id=str(row["school_id"]),
        strand=row.get("strand"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_student(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students s WHERE s.student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, subject_name, grade_level, strand, schedule_start, schedule_end
                FROM subjects
                WHERE subject_id=%s
                """,
                (subject_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Subject(
                subject_id=str(row["subject_id"]),
                subject_name=row["subject_name"],
                grade_level=int(row.get("grade_level") or 0),
                strand=row.get("strand"),
                schedule_start=normalize_mysql_time(row.get("schedule_start")),
                schedule_end=normalize_mysql_time(row.get("schedule_end")),
            )

    def find_enrolled_student(
        self, *, student_id: str, subject_id: str, teacher_id: str, school_id: str
    ) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students s
                INNER JOIN teacher_subjects ts ON ts.section = s.section
                INNER JOIN subjects sub ON sub.subject_id = ts.subject_id
                WHERE s.student_id=%s
                  AND ts.subject_id=%s
                  AND ts.teacher_id=%s
                  AND s.school_id=%s
                  AND s.is_active=1
                LIMIT 1
                """,
                (student_id, subject_id, teacher_id, school_id),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_assignments(self, *, teacher_id: str, subject_id: str) -> Sequence[TeacherAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, subject_id, section
                FROM teacher_subjects
                WHERE teacher_id=%s AND subject_id=%s
                """,
                (teacher_id, subject_id),
            )
            return [
                TeacherAssignment(
                    teacher_id=str(r["teacher_id"]),
                    subject_id=str(r["subject_id"]),
                    section=r["section"],
                )
                for r in fetchall(cur)
            ]
