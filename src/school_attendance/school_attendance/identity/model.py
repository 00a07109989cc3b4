from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.constants import UNKNOWN
from ..core.enums import PayloadShape, ValidationReason


@dataclass(frozen=True)
class ScannedIdentity:
    """Student identity decoded from a QR payload. Never persisted."""

    student_id: str
    full_name: str = UNKNOWN
    grade_level: int = 0
    section: str = UNKNOWN
    school_id: str = ""
    strand: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "fullName": self.full_name,
            "gradeLevel": self.grade_level,
            "section": self.section,
            "schoolId": self.school_id,
            "strand": self.strand,
        }


@dataclass(frozen=True)
class ActorContext:
    """The teacher doing the scanning.

    Empty ``section``/``school_id`` and ``grade_level == 0`` mean "unrestricted".
    """

    teacher_id: str
    school_id: str
    grade_level: int = 0
    section: str = ""
    strand: Optional[str] = None
    full_name: str = ""

    def to_dict(self) -> dict:
        return {
            "teacherId": self.teacher_id,
            "fullName": self.full_name,
            "schoolId": self.school_id,
            "gradeLevel": self.grade_level,
            "section": self.section,
            "strand": self.strand,
        }


@dataclass(frozen=True)
class ParsedIdentity:
    identity: ScannedIdentity
    shape: PayloadShape


@dataclass(frozen=True)
class ParseError:
    raw: str
    reason: ValidationReason = ValidationReason.INVALID_FORMAT
    message: str = "Invalid QR code format. Please scan a valid student QR code."


ParseResult = Union[ParsedIdentity, ParseError]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: ValidationReason
    message: str
    identity: Optional[ScannedIdentity] = None

    @classmethod
    def accept(cls, identity: ScannedIdentity, message: str) -> "ValidationResult":
        return cls(is_valid=True, reason=ValidationReason.OK, message=message, identity=identity)

    @classmethod
    def reject(
        cls, reason: ValidationReason, message: str, identity: Optional[ScannedIdentity] = None
    ) -> "ValidationResult":
        return cls(is_valid=False, reason=reason, message=message, identity=identity)

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "reason": self.reason.value,
            "message": self.message,
            "student": self.identity.to_dict() if self.identity else None,
        }
