from __future__ import annotations

import logging
from datetime import time
from typing import Optional

from ..core.enums import ValidationReason
from ..identity.model import ActorContext, ParsedIdentity, ValidationResult
from ..identity.parser import parse_identity
from ..identity.validator import NO_ACTOR_MESSAGE, validate_identity
from .model import Student, Subject
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)

# Strand only matters for senior high subjects.
STRAND_FROM_GRADE = 11


class EnrollmentValidator:
    """Server-side eligibility checks against the authoritative roster."""

    def __init__(self, enrollment: EnrollmentRepository):
        self._enrollment = enrollment

    def subject_schedule_start(self, subject_id: Optional[str]) -> Optional[time]:
        if not subject_id:
            return None
        subject = self._enrollment.get_subject(subject_id)
        return subject.schedule_start if subject else None

    def validate_against_roster(self, raw_text: str, actor: Optional[ActorContext]) -> ValidationResult:
        """Resolve the scanned id to the stored student, then run the actor checks on that row."""
        if actor is None:
            return ValidationResult.reject(ValidationReason.NO_ACTOR, NO_ACTOR_MESSAGE)

        parsed = parse_identity(raw_text, actor)
        if not isinstance(parsed, ParsedIdentity):
            return ValidationResult.reject(parsed.reason, parsed.message)

        student = self._enrollment.get_student(parsed.identity.student_id)
        if not student or not student.is_active:
            return ValidationResult.reject(
                ValidationReason.STUDENT_NOT_FOUND,
                f"Student not found: {parsed.identity.student_id}",
                parsed.identity,
            )
        return validate_identity(student.to_identity(), actor)

    def validate_scan_for_subject(
        self, raw_text: str, subject_id: str, actor: Optional[ActorContext]
    ) -> ValidationResult:
        if actor is None:
            return ValidationResult.reject(ValidationReason.NO_ACTOR, NO_ACTOR_MESSAGE)
        parsed = parse_identity(raw_text, actor)
        if not isinstance(parsed, ParsedIdentity):
            return ValidationResult.reject(parsed.reason, parsed.message)
        return self.validate_for_subject(parsed.identity.student_id, subject_id, actor)

    def validate_for_subject(
        self, student_id: str, subject_id: str, actor: Optional[ActorContext]
    ) -> ValidationResult:
        if actor is None:
            return ValidationResult.reject(ValidationReason.NO_ACTOR, NO_ACTOR_MESSAGE)

        student = self._enrollment.find_enrolled_student(
            student_id=student_id,
            subject_id=subject_id,
            teacher_id=actor.teacher_id,
            school_id=actor.school_id,
        )
        if student is None:
            return self._diagnose(student_id, subject_id, actor)

        subject = self._enrollment.get_subject(subject_id)
        if subject is None:
            return ValidationResult.reject(ValidationReason.SUBJECT_NOT_FOUND, f"Subject not found: {subject_id}")

        mismatch = self._check_subject_fit(student, subject)
        if mismatch is not None:
            return mismatch

        return ValidationResult.accept(
            student.to_identity(),
            f"Valid student: {student.full_name} (Grade {student.grade_level}, Section {student.section})",
        )

    def _check_subject_fit(self, student: Student, subject: Subject) -> Optional[ValidationResult]:
        if student.grade_level != subject.grade_level:
            return ValidationResult.reject(
                ValidationReason.NOT_ENROLLED,
                f"Student grade level ({student.grade_level}) does not match subject grade level ({subject.grade_level})",
                student.to_identity(),
            )
        if subject.grade_level >= STRAND_FROM_GRADE and subject.strand and student.strand != subject.strand:
            return ValidationResult.reject(
                ValidationReason.STRAND_MISMATCH,
                f"Student strand ({student.strand or 'none'}) does not match subject strand ({subject.strand})",
                student.to_identity(),
            )
        return None

    def _diagnose(self, student_id: str, subject_id: str, actor: ActorContext) -> ValidationResult:
        """The join found nothing; work out which link is missing."""
        student = self._enrollment.get_student(student_id)
        if student is None or not student.is_active:
            return ValidationResult.reject(ValidationReason.STUDENT_NOT_FOUND, f"Student not found: {student_id}")

        subject = self._enrollment.get_subject(subject_id)
        if subject is None:
            return ValidationResult.reject(ValidationReason.SUBJECT_NOT_FOUND, f"Subject not found: {subject_id}")

        identity = student.to_identity()
        if student.school_id != actor.school_id:
            return ValidationResult.reject(
                ValidationReason.SCHOOL_MISMATCH,
                f"Student is from different school. Student school: {student.school_id}, "
                f"Requested school: {actor.school_id}",
                identity,
            )
        if student.grade_level != subject.grade_level:
            return ValidationResult.reject(
                ValidationReason.NOT_ENROLLED,
                f"Grade level mismatch. Student grade: {student.grade_level}, Subject grade: {subject.grade_level}",
                identity,
            )

        assignments = self._enrollment.get_assignments(teacher_id=actor.teacher_id, subject_id=subject_id)
        if not assignments:
            return ValidationResult.reject(
                ValidationReason.TEACHER_NOT_ASSIGNED,
                f"You are not assigned to teach {subject.subject_name}",
                identity,
            )
        if student.section not in {a.section for a in assignments}:
            return ValidationResult.reject(
                ValidationReason.NOT_ENROLLED,
                f"Student is not enrolled in section {student.section} for {subject.subject_name}",
                identity,
            )

        logger.warning("Enrollment lookup for %s in %s failed with no identifiable cause", student_id, subject_id)
        return ValidationResult.reject(
            ValidationReason.NOT_ENROLLED,
            "Student not found or grade level does not match subject, or wrong school",
            identity,
        )
