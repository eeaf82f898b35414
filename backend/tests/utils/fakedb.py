"""In-memory DB-API stand-ins for unit tests (no live database needed)."""

import threading
from typing import Any

from dbconnector.models import ConnectionProfile, ProductTypeEnum

PROBE_SQL = "SELECT 1"


def make_profile(name: str = "wh", **overrides: Any) -> ConnectionProfile:
    data: dict[str, Any] = {
        "name": name,
        "product_type": ProductTypeEnum.POSTGRES,
        "host": "localhost",
        "port": 5432,
        "database": "db",
        "username": "u",
        "password": "p",
    }
    data.update(overrides)
    return ConnectionProfile.model_validate(data)


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self.description: list[tuple[Any, ...]] | None = None
        self.rowcount = -1
        self._rows: list[tuple[Any, ...]] = []
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        if self._conn.closed:
            raise RuntimeError("connection is closed")
        if sql == PROBE_SQL:
            if not self._conn.alive:
                raise RuntimeError("server closed the connection unexpectedly")
            self.description = [("?column?",)]
            self._rows = [(1,)]
            self.rowcount = 1
            return
        db = self._conn.db
        self._conn.executed.append((sql, params))
        if db.fail_with is not None:
            raise db.fail_with
        self.description = [(name,) for name in db.columns] if db.columns else None
        self._rows = list(db.rows)
        self.rowcount = db.rowcount if db.rowcount is not None else len(self._rows)

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.closed = True
        if self._conn.db.close_cursor_error is not None:
            raise self._conn.db.close_cursor_error


class FakeConnection:
    def __init__(self, db: "FakeDatabase") -> None:
        self.db = db
        self.alive = True
        self.closed = False
        self.cursors: list[FakeCursor] = []
        self.executed: list[tuple[str, Any]] = []

    def cursor(self) -> FakeCursor:
        cur = FakeCursor(self)
        self.cursors.append(cur)
        return cur

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.db._on_close()


class FakeDatabase:
    """Connection factory; configure the next statement result via attributes."""

    def __init__(self) -> None:
        self.columns: list[str] = []
        self.rows: list[tuple[Any, ...]] = []
        self.rowcount: int | None = None
        self.fail_with: Exception | None = None
        self.close_cursor_error: Exception | None = None
        self.connect_error: Exception | None = None
        self.connections: list[FakeConnection] = []
        self.live = 0
        self.max_live = 0
        self._lock = threading.Lock()

    def connect(self, profile: ConnectionProfile) -> FakeConnection:  # noqa: ARG002
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self)
        with self._lock:
            self.connections.append(conn)
            self.live += 1
            self.max_live = max(self.max_live, self.live)
        return conn

    def _on_close(self) -> None:
        with self._lock:
            self.live -= 1

    def result(self, columns: list[str], rows: list[tuple[Any, ...]]) -> None:
        self.columns = columns
        self.rows = rows
        self.rowcount = None
