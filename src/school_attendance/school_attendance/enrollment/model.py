from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..identity.model import ScannedIdentity


@dataclass(frozen=True)
class Student:
    """Authoritative student row."""

    student_id: str
    full_name: str
    grade_level: int
    section: str
    school_id: str
    strand: Optional[str] = None
    is_active: bool = True

    def to_identity(self) -> ScannedIdentity:
        return ScannedIdentity(
            student_id=self.student_id,
            full_name=self.full_name,
            grade_level=self.grade_level,
            section=self.section,
            school_id=self.school_id,
            strand=self.strand,
        )


@dataclass(frozen=True)
class Subject:
    subject_id: str
    subject_name: str
    grade_level: int
    strand: Optional[str] = None
    schedule_start: Optional[time] = None
    schedule_end: Optional[time] = None


@dataclass(frozen=True)
class TeacherAssignment:
    """A teacher teaches a subject to one section."""

    teacher_id: str
    subject_id: str
    section: str
