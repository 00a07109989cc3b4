from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, Subject, TeacherAssignment


class EnrollmentRepository(Protocol):
    """Read-only access to students, subjects and teacher assignments."""

    def get_student(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def find_enrolled_student(
        self, *, student_id: str, subject_id: str, teacher_id: str, school_id: str
    ) -> Optional[Student]:
        """Student taught this subject by this teacher (matching section) within the school."""

        raise NotImplementedError

    def get_assignments(self, *, teacher_id: str, subject_id: str) -> Sequence[TeacherAssignment]:
        raise NotImplementedError
