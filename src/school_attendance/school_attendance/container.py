from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .accounts.mysql_teacher_repository import MySQLTeacherRepository
from .accounts.repository import TeacherRepository
from .accounts.service import AuthService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLDailyAttendanceRepository
from .attendance.repository import DailyAttendanceRepository
from .attendance.service import DailyAttendanceService
from .core.constants import DEFAULT_MAX_CONNECTIONS, DEFAULT_RETRY_ATTEMPTS, DEFAULT_SCHOOL_START
from .database.connection import DatabaseConnection, DBConfig, RetryPolicy
from .enrollment.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollment.repository import EnrollmentRepository
from .enrollment.service import EnrollmentValidator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    teachers_repo: TeacherRepository
    enrollment_repo: EnrollmentRepository
    attendance_repo: DailyAttendanceRepository

    auth_service: AuthService
    enrollment_validator: EnrollmentValidator
    attendance_service: DailyAttendanceService


def build_container(
    *,
    db_config: dict,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    school_start: time = DEFAULT_SCHOOL_START,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(
        config,
        max_connections=max_connections,
        retry_policy=RetryPolicy(max_attempts=retry_attempts),
    )

    teachers_repo = MySQLTeacherRepository(conn)
    enrollment_repo = MySQLEnrollmentRepository(conn)
    attendance_repo = MySQLDailyAttendanceRepository(conn)

    return Container(
        conn=conn,
        teachers_repo=teachers_repo,
        enrollment_repo=enrollment_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(teachers_repo),
        enrollment_validator=EnrollmentValidator(enrollment_repo),
        attendance_service=DailyAttendanceService(
            attendance_repo,
            strategy_factory=AttendanceStrategyFactory(school_start=school_start),
        ),
    )
