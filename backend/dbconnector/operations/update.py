"""Update operation: bind a JSON payload to an UPDATE statement's placeholders."""

from dbconnector.core.pool import PooledConnection
from dbconnector.engines.sql import run_update
from dbconnector.models import OperationResult

from .base import Operation
from .context import PAYLOAD, UPDATE_QUERY, OperationContext


class Update(Operation):
    name = "update"

    def perform(self, ctx: OperationContext, conn: PooledConnection) -> OperationResult:
        return run_update(conn, ctx.get_parameter(UPDATE_QUERY), ctx.get_parameter(PAYLOAD))
