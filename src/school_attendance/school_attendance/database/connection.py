from __future__ import annotations

import logging
import random
import threading
import time as _time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import DEFAULT_MAX_CONNECTIONS, DEFAULT_RETRY_ATTEMPTS
from ..core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

# Server-side "too many connections" family; worth waiting for a free slot.
_POOL_EXHAUSTED_ERRNOS = frozenset(
    {
        errorcode.ER_CON_COUNT_ERROR,
        errorcode.ER_TOO_MANY_USER_CONNECTIONS,
        errorcode.ER_USER_LIMIT_REACHED,
    }
)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff with jitter for transient connection failures."""

    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    base_delay: float = 1.0
    max_jitter: float = 1.0

    def delay_for(self, attempt: int, *, rand: Callable[[], float] = random.random) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.base_delay * (2 ** (attempt - 1)) + self.max_jitter * rand()


def is_pool_exhausted(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) in _POOL_EXHAUSTED_ERRNOS


class DatabaseConnection:
    """Singleton-like DB connection factory with a capped number of open connections.

    Note: We create short-lived connections per operation. Each one holds a slot of a
    counting semaphore for its whole lifetime, so at most ``max_connections`` are open.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(
        self,
        config: DBConfig,
        *,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        retry_policy: RetryPolicy | None = None,
        acquire_timeout: float = 10.0,
        connector: Callable[..., object] | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        self._config = config
        self._slots = threading.BoundedSemaphore(int(max_connections))
        self._retry = retry_policy or RetryPolicy()
        self._acquire_timeout = float(acquire_timeout)
        self._connector = connector or mysql.connector.connect
        self._sleep = sleep or _time.sleep
        self._active = 0
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig, **kwargs) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config, **kwargs)
        return cls._instance

    @property
    def active_connections(self) -> int:
        with self._lock:
            return self._active

    def connect(self):
        return self._connector(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def _wait_or_give_up(self, attempt: int, reason: str, cause: BaseException | None = None) -> None:
        if attempt >= self._retry.max_attempts:
            raise StoreUnavailableError(
                f"Database unavailable after {attempt} attempts: {reason}"
            ) from cause
        delay = self._retry.delay_for(attempt)
        logger.warning(
            "Connection attempt %s/%s failed (%s); retrying in %.1fs",
            attempt,
            self._retry.max_attempts,
            reason,
            delay,
        )
        self._sleep(delay)

    def _track(self, delta: int) -> None:
        with self._lock:
            self._active += delta
            logger.debug("Active connections: %s", self._active)

    @contextmanager
    def connection(self) -> Iterator:
        """Yield an open connection; the slot is released on every exit path."""
        for attempt in range(1, self._retry.max_attempts + 1):
            if not self._slots.acquire(timeout=self._acquire_timeout):
                self._wait_or_give_up(attempt, "no free connection slot")
                continue
            try:
                conn = self.connect()
            except mysql.connector.Error as exc:
                self._slots.release()
                if not is_pool_exhausted(exc):
                    raise
                self._wait_or_give_up(attempt, str(exc), exc)
                continue

            self._track(+1)
            try:
                yield conn
            finally:
                try:
                    conn.close()
                finally:
                    self._track(-1)
                    self._slots.release()
            return

        raise StoreUnavailableError("Database unavailable: retry policy allows no attempts")
