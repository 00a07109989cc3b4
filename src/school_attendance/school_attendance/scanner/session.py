from __future__ import annotations

import logging
import socket
from datetime import datetime
from typing import Optional

from ..identity.model import ActorContext

logger = logging.getLogger(__name__)


def make_device_id(now: Optional[datetime] = None) -> str:
    """DEV_<hostname>_<yyyymmdd>."""
    now = now or datetime.now()
    return f"DEV_{socket.gethostname()}_{now:%Y%m%d}"


class ScanSession:
    """The logged-in teacher on this device, from login until logout."""

    def __init__(self, actor: ActorContext, device_id: str):
        self._actor: Optional[ActorContext] = actor
        self._device_id = device_id

    @classmethod
    def open(cls, actor: ActorContext, device_id: Optional[str] = None) -> "ScanSession":
        logger.info("Scan session opened for teacher %s", actor.teacher_id)
        return cls(actor, device_id or make_device_id())

    @property
    def actor(self) -> Optional[ActorContext]:
        return self._actor

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def is_open(self) -> bool:
        return self._actor is not None

    def close(self) -> None:
        if self._actor is not None:
            logger.info("Scan session closed for teacher %s", self._actor.teacher_id)
        self._actor = None
