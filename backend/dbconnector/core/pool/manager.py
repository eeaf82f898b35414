"""
Connection pool for named external connections.

Connections are pooled per (connector_id, connection_name) key. Includes a
liveness probe on checkout, max-age eviction, a cap on live connections per
key, and thread-safe singleton initialisation.
"""

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from dbconnector.core.config import settings
from dbconnector.core.errors import ConnectError, ConnectorError, ErrorKind
from dbconnector.models import ConnectionProfile

from .connect import backslash_escapes_for, connect, paramstyle_for
from .connection import PooledConnection, PoolKey

_log = logging.getLogger(__name__)


@dataclass
class _KeyPool:
    profile: ConnectionProfile
    max_active: int
    max_idle: int
    max_wait_sec: float
    max_age_sec: float
    validation_idle_sec: float
    slots: threading.BoundedSemaphore = field(init=False)
    idle: list[PooledConnection] = field(default_factory=list)
    active: int = 0

    def __post_init__(self) -> None:
        self.slots = threading.BoundedSemaphore(self.max_active)


def _resolve(profile: ConnectionProfile) -> _KeyPool:
    cfg = profile.pool

    def pick(value: Any, default: Any) -> Any:
        return default if value is None else value

    return _KeyPool(
        profile=profile,
        max_active=pick(cfg.max_active, settings.EXTERNAL_DB_POOL_MAX_ACTIVE),
        max_idle=pick(cfg.max_idle, settings.EXTERNAL_DB_POOL_SIZE),
        max_wait_sec=float(pick(cfg.max_wait_sec, settings.EXTERNAL_DB_POOL_MAX_WAIT_SEC)),
        max_age_sec=float(pick(cfg.max_age_sec, settings.EXTERNAL_DB_POOL_MAX_AGE_SEC)),
        validation_idle_sec=float(
            pick(cfg.validation_idle_sec, settings.EXTERNAL_DB_POOL_VALIDATION_IDLE_SEC)
        ),
    )


class PoolManager:
    """Per-(connector, name) connection pool with liveness probe, max-age and max-active."""

    def __init__(self, connector_id: str | None = None) -> None:
        self.connector_id = connector_id or settings.CONNECTOR_NAME
        self._pools: dict[PoolKey, _KeyPool] = {}
        self._owners: dict[int, _KeyPool] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(
        self,
        profile: ConnectionProfile,
        *,
        connector_id: str | None = None,
        replace: bool = False,
    ) -> bool:
        """Register *profile* under its name. Returns False if already registered (and not replaced)."""
        key = (connector_id or self.connector_id, profile.name)
        with self._lock:
            existing = self._pools.get(key)
            if existing is not None and not replace:
                return False
            self._pools[key] = _resolve(profile)
        if existing is not None:
            self._close_idle(existing)
        _log.info("Registered connection %s:%s (%s)", key[0], key[1], profile.product_type.value)
        return True

    def has_connection(self, name: str, *, connector_id: str | None = None) -> bool:
        with self._lock:
            return (connector_id or self.connector_id, name) in self._pools

    # ------------------------------------------------------------------
    # Checkout / return
    # ------------------------------------------------------------------

    def borrow(self, connector_id: str, name: str) -> PooledConnection:
        """Get a healthy connection for the key (from the idle set or freshly opened)."""
        key = (connector_id, name)
        with self._lock:
            kp = self._pools.get(key)
        if kp is None:
            raise ConnectError(f"No connection is configured with the name '{name}'.")

        if not kp.slots.acquire(timeout=kp.max_wait_sec):
            raise ConnectError(
                f"Connection pool exhausted for '{name}': "
                f"{kp.max_active} connection(s) in use after waiting {kp.max_wait_sec:g}s."
            )
        try:
            conn = self._checkout_idle(kp)
            if conn is None:
                conn = self._open(kp, key)
        except BaseException:
            kp.slots.release()
            raise
        with self._lock:
            conn.checked_out = True
            kp.active += 1
            self._owners[id(conn)] = kp
        return conn

    def release(self, connector_id: str, name: str, conn: PooledConnection) -> None:
        """Return a connection to the idle set (or close it if the idle set is full)."""
        kp = self._check_in(conn)
        if kp is None:
            _log.warning("Ignoring release of %r for %s:%s: not checked out", conn, connector_id, name)
            return

        keep = False
        if not conn.closed and conn.age() <= kp.max_age_sec:
            with self._lock:
                current = self._pools.get(conn.key)
                if current is kp and len(kp.idle) < kp.max_idle:
                    kp.idle.append(conn)
                    keep = True
        if not keep:
            conn.close()
        # Slot is freed only after the connection is visible in the idle set.
        kp.slots.release()

    def invalidate(self, connector_id: str, name: str, conn: PooledConnection) -> None:
        """Close a checked-out connection and free its slot instead of returning it."""
        kp = self._check_in(conn)
        if kp is None:
            return
        _log.info("Evicting connection %s:%s", connector_id, name)
        conn.close()
        kp.slots.release()

    @contextmanager
    def connection(self, name: str, *, connector_id: str | None = None) -> Iterator[PooledConnection]:
        """Borrow for the duration of a ``with`` block; released (or evicted) on every exit path."""
        cid = connector_id or self.connector_id
        conn = self.borrow(cid, name)
        try:
            yield conn
        except BaseException as e:
            # Invalid input is rejected before any statement runs; the session is untouched.
            rejected = isinstance(e, ConnectorError) and e.kind is ErrorKind.INVALID_CONFIGURATION
            if rejected or conn.is_valid():
                self.release(cid, name, conn)
            else:
                self.invalidate(cid, name, conn)
            raise
        else:
            self.release(cid, name, conn)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self, name: str | None = None, *, connector_id: str | None = None) -> None:
        """Close idle connections and drop the registration. ``None`` = dispose all pools.

        Connections checked out at that moment are closed when released.
        """
        with self._lock:
            if name is not None:
                kp = self._pools.pop((connector_id or self.connector_id, name), None)
                dropped = [kp] if kp is not None else []
            else:
                dropped = list(self._pools.values())
                self._pools.clear()
        for kp in dropped:
            self._close_idle(kp)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {
                "connections": len(self._pools),
                "idle_connections": sum(len(kp.idle) for kp in self._pools.values()),
                "active_connections": sum(kp.active for kp in self._pools.values()),
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _checkout_idle(self, kp: _KeyPool) -> PooledConnection | None:
        while True:
            with self._lock:
                conn = kp.idle.pop() if kp.idle else None
            if conn is None:
                return None
            if conn.age() > kp.max_age_sec:
                conn.close()
                continue
            if conn.idle_for() >= kp.validation_idle_sec and not conn.is_valid():
                _log.info("Discarding dead connection %s:%s", *conn.key)
                conn.close()
                continue
            return conn

    def _open(self, kp: _KeyPool, key: PoolKey) -> PooledConnection:
        try:
            handle = connect(kp.profile)
        except Exception as e:
            _log.error("Failed to connect %s:%s: %s", key[0], key[1], e, exc_info=True)
            raise ConnectError(f"Failed to open a connection for '{key[1]}': {e}") from e
        return PooledConnection(
            handle,
            key,
            paramstyle=paramstyle_for(kp.profile),
            backslash_escapes=backslash_escapes_for(kp.profile),
        )

    def _check_in(self, conn: PooledConnection) -> _KeyPool | None:
        with self._lock:
            if not conn.checked_out:
                return None
            conn.checked_out = False
            conn.last_used = time.monotonic()
            kp = self._owners.pop(id(conn))
            kp.active -= 1
            return kp

    def _close_idle(self, kp: _KeyPool) -> None:
        with self._lock:
            entries = list(kp.idle)
            kp.idle.clear()
        for conn in entries:
            conn.close()


_pool_manager: PoolManager | None = None
_pool_lock = threading.Lock()


def get_pool_manager() -> PoolManager:
    """Return the singleton PoolManager (thread-safe double-checked locking)."""
    global _pool_manager
    if _pool_manager is None:
        with _pool_lock:
            if _pool_manager is None:
                pm = PoolManager()
                for profile in settings.EXTERNAL_DB_CONNECTIONS:
                    pm.register(profile)
                _pool_manager = pm
    return _pool_manager


def shutdown_pool_manager() -> None:
    """Dispose the singleton's connections; the next get_pool_manager() starts fresh."""
    global _pool_manager
    with _pool_lock:
        pm, _pool_manager = _pool_manager, None
    if pm is not None:
        pm.dispose()
