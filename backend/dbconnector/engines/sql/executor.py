"""
Execute one statement on a pooled connection.

- run_query: SELECT-like statement -> list of row dicts (column -> string value)
- run_update: UPDATE with ``?`` placeholders bound from a JSON payload -> OperationResult
- run_execute: any single statement without bound values -> OperationResult

Statements are written with ``?`` placeholders; they are adapted to the driver's
paramstyle outside quoted literals and comments. Cursors are closed on every exit
path; close failures are logged and never raised.
"""

import json
import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from dbconnector.core.config import settings
from dbconnector.core.errors import InvalidConfigurationError, OperationError
from dbconnector.core.pool import PooledConnection
from dbconnector.models import OperationResult

from .extractor import extract_bound_columns

_log = logging.getLogger(__name__)

EXECUTION_ERROR = "Error occurred while executing the query."


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def to_string(value: Any) -> str | None:
    """Normalize a driver value to its string form. NULL stays None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str, separators=(",", ":"))
    return str(value)


def _json_as_string(value: Any) -> str:
    """String form of a JSON payload value (strings as-is, scalars as JSON text, null as "")."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def parse_payload(payload: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse the update payload into a flat field -> value mapping."""
    if payload is None or (isinstance(payload, str) and not payload.strip()):
        raise InvalidConfigurationError("Empty Payload is provided.")
    if isinstance(payload, Mapping):
        data: Any = dict(payload)
    else:
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise InvalidConfigurationError(f"Payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigurationError("Payload must be a JSON object.")
    return data


def adapt_placeholders(sql: str, paramstyle: str, *, backslash_escapes: bool = False) -> str:
    """Rewrite ``?`` placeholders for ``format`` drivers (psycopg, pymysql).

    Quoted literals, quoted identifiers and comments are copied untouched.
    Literal ``%`` is doubled because format drivers interpolate the whole string.
    With *backslash_escapes* (MySQL) a backslash inside a string literal escapes
    the next character; otherwise it is an ordinary character.
    """
    if paramstyle != "format":
        return sql
    out: list[str] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if ch in ("'", '"', "`"):
            quote = ch
            escapes = backslash_escapes and quote != "`"
            j = i + 1
            while j < length:
                if sql[j] == quote:
                    if j + 1 < length and sql[j + 1] == quote:
                        j += 2
                        continue
                    break
                if escapes and sql[j] == "\\" and j + 1 < length:
                    j += 2
                    continue
                j += 1
            out.append(sql[i : j + 1].replace("%", "%%"))
            i = j + 1
            continue

        if ch == "-" and i + 1 < length and sql[i + 1] == "-":
            end = sql.find("\n", i)
            end = length if end == -1 else end + 1
            out.append(sql[i:end].replace("%", "%%"))
            i = end
            continue

        if ch == "/" and i + 1 < length and sql[i + 1] == "*":
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            out.append(sql[i:end].replace("%", "%%"))
            i = end
            continue

        if ch == "?":
            out.append("%s")
        elif ch == "%":
            out.append("%%")
        else:
            out.append(ch)
        i += 1

    return "".join(out)


def _adapt(sql: str, conn: PooledConnection) -> str:
    return adapt_placeholders(sql, conn.paramstyle, backslash_escapes=conn.backslash_escapes)


# ---------------------------------------------------------------------------
# Cursor helpers
# ---------------------------------------------------------------------------


def _close_cursor(cursor: Any, operation: str) -> None:
    if cursor is None:
        return
    try:
        cursor.close()
    except Exception:
        _log.error(
            "%s:%s Error while closing the statement.",
            settings.CONNECTOR_NAME,
            operation,
            exc_info=True,
        )


def _affected_rows(cursor: Any) -> int:
    count = cursor.rowcount
    if (count is None or count < 0) and cursor.description is not None:
        # Trino reports the update count only once the result is consumed.
        cursor.fetchall()
        count = cursor.rowcount
    return count if count is not None and count >= 0 else 0


def cursor_to_rows(cursor: Any) -> list[dict[str, str | None]]:
    """Convert the cursor result to a list of dicts with string values, in column order."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [
        dict(zip(names, (to_string(v) for v in row), strict=True))
        for row in cursor.fetchall()
    ]


# ---------------------------------------------------------------------------
# Statement execution
# ---------------------------------------------------------------------------


def run_query(
    conn: PooledConnection,
    sql: str | None,
    params: Sequence[Any] | None = None,
) -> list[dict[str, str | None]]:
    """Run a read statement once and return its rows."""
    if not sql or not sql.strip():
        raise InvalidConfigurationError("Execute Query is not provided.")

    cursor = None
    try:
        cursor = conn.get_connection().cursor()
        if params:
            cursor.execute(_adapt(sql, conn), list(params))
        else:
            cursor.execute(sql)
        rows = cursor_to_rows(cursor)
        _log.debug("Query returned %d row(s)", len(rows))
        return rows
    except Exception as e:
        _log.error("Query failed: %s. SQL: %s", e, sql, exc_info=True)
        raise OperationError(EXECUTION_ERROR) from e
    finally:
        _close_cursor(cursor, "query")


def bind_values(columns: Sequence[str], payload: Mapping[str, Any]) -> list[str]:
    """Positional values for *columns*; a column missing from the payload binds ""."""
    return [_json_as_string(payload.get(column)) for column in columns]


def run_update(
    conn: PooledConnection,
    sql: str | None,
    payload: str | Mapping[str, Any] | None,
) -> OperationResult:
    """Bind payload values in SET/WHERE column order and execute the update."""
    if not sql or not sql.strip():
        raise InvalidConfigurationError("Update Query is not provided.")
    values = parse_payload(payload)
    columns = extract_bound_columns(sql)
    params = bind_values(columns, values)
    missing = [c for c in columns if c not in values]
    if missing:
        _log.warning("Payload has no value for %s; binding empty string", ", ".join(missing))

    cursor = None
    try:
        cursor = conn.get_connection().cursor()
        cursor.execute(_adapt(sql, conn), params)
        rows_updated = _affected_rows(cursor)
    except Exception as e:
        _log.error("Update failed: %s. SQL: %s", e, sql, exc_info=True)
        raise OperationError(EXECUTION_ERROR) from e
    finally:
        _close_cursor(cursor, "update")
    return OperationResult(
        operation="update", success=True, message=f"Rows affected :  {rows_updated}"
    )


def run_execute(conn: PooledConnection, sql: str | None) -> OperationResult:
    """Run any single statement without bound values (DDL, DML)."""
    if not sql or not sql.strip():
        raise InvalidConfigurationError("Execute Query is not provided.")

    cursor = None
    try:
        cursor = conn.get_connection().cursor()
        cursor.execute(sql)
        rows_affected = _affected_rows(cursor)
    except Exception as e:
        _log.error("Execute failed: %s. SQL: %s", e, sql, exc_info=True)
        raise OperationError(EXECUTION_ERROR) from e
    finally:
        _close_cursor(cursor, "execute")
    return OperationResult(
        operation="execute", success=True, message=f"Rows affected :  {rows_affected}"
    )
