"""Query operation: run a read statement and return the rows."""

from typing import Any

from dbconnector.core.pool import PooledConnection
from dbconnector.engines.sql import run_query

from .base import Operation
from .context import QUERY, OperationContext


class Query(Operation):
    name = "query"

    def perform(self, ctx: OperationContext, conn: PooledConnection) -> list[dict[str, Any]]:
        return run_query(conn, ctx.get_parameter(QUERY))
