from __future__ import annotations

from typing import Optional, Protocol

from .model import TeacherAccount


class TeacherRepository(Protocol):
    """Repository interface for teacher accounts.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, teacher_id: str) -> Optional[TeacherAccount]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[TeacherAccount]:
        raise NotImplementedError
