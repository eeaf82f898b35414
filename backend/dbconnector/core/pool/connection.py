"""
A pooled connection: one live DB-API session plus the bookkeeping the pool needs.
"""

import logging
import time
from typing import Any

from .health import health_check

_log = logging.getLogger(__name__)

PoolKey = tuple[str, str]  # (connector_id, connection_name)


class PooledConnection:
    """Wraps one DB-API connection. Held by at most one caller at a time."""

    __slots__ = (
        "handle",
        "key",
        "paramstyle",
        "backslash_escapes",
        "created_at",
        "last_used",
        "checked_out",
        "_closed",
    )

    def __init__(
        self,
        handle: Any,
        key: PoolKey,
        *,
        paramstyle: str = "qmark",
        backslash_escapes: bool = False,
    ) -> None:
        self.handle = handle
        self.key = key
        self.paramstyle = paramstyle
        self.backslash_escapes = backslash_escapes  # backslash escapes inside quoted literals
        now = time.monotonic()
        self.created_at = now  # time.monotonic() when the connection was opened
        self.last_used = now  # time.monotonic() when last returned to the pool
        self.checked_out = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_connection(self) -> Any:
        """The underlying DB-API connection (execution handle)."""
        return self.handle

    def age(self) -> float:
        return time.monotonic() - self.created_at

    def idle_for(self) -> float:
        return time.monotonic() - self.last_used

    def is_valid(self) -> bool:
        """Cheap liveness probe; False once closed."""
        if self._closed:
            return False
        return health_check(self.handle)

    def close(self) -> None:
        """Close the session. Failures are logged, never raised."""
        if self._closed:
            return
        self._closed = True
        try:
            self.handle.close()
        except Exception:
            _log.warning("Error while closing connection %s:%s", *self.key, exc_info=True)

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("busy" if self.checked_out else "idle")
        return f"<PooledConnection {self.key[0]}:{self.key[1]} {state}>"
