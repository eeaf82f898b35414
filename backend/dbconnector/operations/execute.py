"""Execute operation: run one statement without bound values."""

from dbconnector.core.pool import PooledConnection
from dbconnector.engines.sql import run_execute
from dbconnector.models import OperationResult

from .base import Operation
from .context import EXECUTE_QUERY, OperationContext


class Execute(Operation):
    name = "execute"

    def perform(self, ctx: OperationContext, conn: PooledConnection) -> OperationResult:
        return run_execute(conn, ctx.get_parameter(EXECUTE_QUERY))
