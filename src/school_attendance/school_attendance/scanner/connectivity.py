from __future__ import annotations

import logging
from typing import Callable, List, Optional

import requests

from ..core.constants import DEFAULT_HEALTH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ConnectivityProbe:
    """Answers "can the canonical store be reached right now?" via its health endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_HEALTH_TIMEOUT_SECONDS,
    ):
        self._url = base_url.rstrip("/") + "/api/health"
        self._session = session or requests.Session()
        self._timeout = float(timeout)
        self._last_state: Optional[bool] = None
        self._listeners: List[Callable[[bool], object]] = []

    @property
    def last_state(self) -> Optional[bool]:
        return self._last_state

    def add_listener(self, listener: Callable[[bool], object]) -> None:
        """Called with the new state whenever a probe flips online/offline."""
        self._listeners.append(listener)

    def is_online(self) -> bool:
        try:
            response = self._session.get(self._url, timeout=self._timeout)
            online = bool(response.ok)
        except requests.RequestException as exc:
            logger.debug("Health check failed: %s", exc)
            online = False

        previous, self._last_state = self._last_state, online
        if previous is not None and previous != online:
            logger.info("Connectivity changed: %s", "online" if online else "offline")
            for listener in list(self._listeners):
                listener(online)
        return online
