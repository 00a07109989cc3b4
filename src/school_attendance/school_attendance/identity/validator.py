from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import is_specified
from ..core.enums import ValidationReason
from .model import ActorContext, ParsedIdentity, ScannedIdentity, ValidationResult
from .parser import parse_identity

logger = logging.getLogger(__name__)

NO_ACTOR_MESSAGE = "No teacher logged in. Please login first."


def check_school(identity: ScannedIdentity, actor: ActorContext) -> Optional[ValidationResult]:
    if is_specified(actor.school_id) and is_specified(identity.school_id) and actor.school_id != identity.school_id:
        return ValidationResult.reject(
            ValidationReason.SCHOOL_MISMATCH,
            f"This QR code is for a different school. Student is from school ID: {identity.school_id}, "
            f"but you are from school ID: {actor.school_id}",
            identity,
        )
    return None


def check_grade(identity: ScannedIdentity, actor: ActorContext) -> Optional[ValidationResult]:
    if actor.grade_level > 0 and identity.grade_level > 0 and actor.grade_level != identity.grade_level:
        return ValidationResult.reject(
            ValidationReason.GRADE_MISMATCH,
            f"This QR code is for Grade {identity.grade_level}, but you teach Grade {actor.grade_level}",
            identity,
        )
    return None


def check_section(identity: ScannedIdentity, actor: ActorContext) -> Optional[ValidationResult]:
    if is_specified(actor.section) and is_specified(identity.section) and actor.section != identity.section:
        return ValidationResult.reject(
            ValidationReason.SECTION_MISMATCH,
            f"This QR code is for section '{identity.section}', but you teach section '{actor.section}'",
            identity,
        )
    return None


# First failing check wins.
CHECKS = (check_school, check_grade, check_section)


def validate_identity(identity: ScannedIdentity, actor: Optional[ActorContext]) -> ValidationResult:
    if actor is None:
        return ValidationResult.reject(ValidationReason.NO_ACTOR, NO_ACTOR_MESSAGE, identity)

    for check in CHECKS:
        failure = check(identity, actor)
        if failure is not None:
            logger.info(
                "Scan of %s rejected for teacher %s: %s",
                identity.student_id,
                actor.teacher_id,
                failure.reason.value,
            )
            return failure

    return ValidationResult.accept(
        identity,
        f"Valid student: {identity.full_name} (Grade {identity.grade_level}, Section {identity.section})",
    )


def validate_scan(raw_text: str, actor: Optional[ActorContext]) -> ValidationResult:
    """Parse then validate; a missing actor is reported before the payload is looked at."""
    if actor is None:
        return ValidationResult.reject(ValidationReason.NO_ACTOR, NO_ACTOR_MESSAGE)

    parsed = parse_identity(raw_text, actor)
    if not isinstance(parsed, ParsedIdentity):
        return ValidationResult.reject(parsed.reason, parsed.message)
    return validate_identity(parsed.identity, actor)
