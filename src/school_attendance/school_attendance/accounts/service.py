from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from ..identity.model import ActorContext
from .repository import TeacherRepository

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid username or password"


class AuthService:
    """Use case: authenticate a teacher and resolve their actor context."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def authenticate(self, username: str, password: str) -> ActorContext:
        username = require_non_empty(username, "username")
        account = self._teachers.get_by_username(username)
        if not account or not account.is_active:
            raise AuthenticationError(_BAD_CREDENTIALS)

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError(_BAD_CREDENTIALS)

        return account.to_actor_context()

    def get_actor_context(self, teacher_id: str) -> Optional[ActorContext]:
        if not teacher_id:
            return None
        account = self._teachers.get_by_id(teacher_id)
        if not account or not account.is_active:
            return None
        return account.to_actor_context()
