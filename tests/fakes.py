"""In-memory repositories shared by service and API tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from school_attendance.accounts.model import TeacherAccount
from school_attendance.attendance.model import DailyAttendanceRecord
from school_attendance.enrollment.model import Student, Subject, TeacherAssignment


class InMemoryDailyAttendance:
    def __init__(self):
        self.rows: dict[str, DailyAttendanceRecord] = {}

    def list_for_student_and_date(self, student_id: str, attendance_date: date):
        rows = [r for r in self.rows.values() if r.student_id == student_id and r.attendance_date == attendance_date]
        return sorted(rows, key=lambda r: r.created_at)

    def list_for_student_between(self, student_id: str, start_date: date, end_date: date):
        rows = [
            r
            for r in self.rows.values()
            if r.student_id == student_id and start_date <= r.attendance_date <= end_date
        ]
        return sorted(rows, key=lambda r: r.attendance_date, reverse=True)

    def insert(self, record: DailyAttendanceRecord) -> None:
        self.rows[record.attendance_id] = record

    def update_time_in(self, *, attendance_id, time_in, status, remarks) -> bool:
        self.rows[attendance_id] = replace(self.rows[attendance_id], time_in=time_in, status=status, remarks=remarks)
        return True

    def update_time_out(self, *, attendance_id, time_out, status, remarks) -> bool:
        row = self.rows[attendance_id]
        if row.time_out is not None:
            return False
        self.rows[attendance_id] = replace(row, time_out=time_out, status=status, remarks=remarks)
        return True

    def update_record(self, record: DailyAttendanceRecord) -> bool:
        self.rows[record.attendance_id] = record
        return True

    def delete_many(self, attendance_ids) -> int:
        removed = 0
        for attendance_id in attendance_ids:
            if self.rows.pop(attendance_id, None) is not None:
                removed += 1
        return removed


@dataclass
class InMemoryEnrollment:
    students: dict[str, Student] = field(default_factory=dict)
    subjects: dict[str, Subject] = field(default_factory=dict)
    assignments: list[TeacherAssignment] = field(default_factory=list)

    def get_student(self, student_id: str) -> Optional[Student]:
        return self.students.get(student_id)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return self.subjects.get(subject_id)

    def find_enrolled_student(self, *, student_id, subject_id, teacher_id, school_id) -> Optional[Student]:
        student = self.students.get(student_id)
        if not student or not student.is_active or student.school_id != school_id:
            return None
        for a in self.assignments:
            if a.teacher_id == teacher_id and a.subject_id == subject_id and a.section == student.section:
                return student
        return None

    def get_assignments(self, *, teacher_id: str, subject_id: str):
        return [a for a in self.assignments if a.teacher_id == teacher_id and a.subject_id == subject_id]


@dataclass
class InMemoryTeachers:
    accounts: dict[str, TeacherAccount] = field(default_factory=dict)

    def get_by_id(self, teacher_id: str) -> Optional[TeacherAccount]:
        return self.accounts.get(teacher_id)

    def get_by_username(self, username: str) -> Optional[TeacherAccount]:
        for account in self.accounts.values():
            if account.username == username:
                return account
        return None
