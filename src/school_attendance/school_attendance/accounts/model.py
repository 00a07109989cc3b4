from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..identity.model import ActorContext


@dataclass(frozen=True)
class TeacherAccount:
    """Domain entity: teacher login plus teaching assignment."""

    teacher_id: str
    username: str
    password_hash: str
    full_name: str
    school_id: str
    grade_level: int = 0
    section: str = ""
    strand: Optional[str] = None
    is_active: bool = True

    def to_actor_context(self) -> ActorContext:
        return ActorContext(
            teacher_id=self.teacher_id,
            school_id=self.school_id,
            grade_level=self.grade_level,
            section=self.section,
            strand=self.strand,
            full_name=self.full_name,
        )
