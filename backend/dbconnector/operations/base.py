"""
Operation boundary: borrow a pooled connection, run one statement, translate the outcome.

Every call ends in exactly one of: a JSON payload on the context, or an
OperationFailure (error code + message) on the context. ConnectorError never
escapes ``Operation.connect``; the connection is released on every exit path.
"""

import logging
from typing import Any

from pydantic import BaseModel

from dbconnector.core.config import settings
from dbconnector.core.errors import ConnectorError, InvalidConfigurationError
from dbconnector.core.pool import PooledConnection, PoolManager, get_pool_manager
from dbconnector.models import OperationFailure

from .context import (
    CONNECTION_NAME,
    JSON_CONTENT_TYPE,
    PROPERTY_ERROR_CODE,
    PROPERTY_ERROR_MESSAGE,
    STATUS_CODE,
    OperationContext,
)

logger = logging.getLogger(__name__)


def get_connection_name(ctx: OperationContext) -> str:
    name = ctx.get_parameter(CONNECTION_NAME)
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfigurationError("Connection name is not provided.")
    return name.strip()


def set_result_as_payload(ctx: OperationContext, result: Any) -> None:
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    ctx.payload = result
    ctx.content_type = JSON_CONTENT_TYPE


def set_error(operation: str, ctx: OperationContext, e: ConnectorError) -> OperationFailure:
    """Record the error code/message on the context and return the failure record."""
    cause = e.__cause__
    failure = OperationFailure(
        operation=operation,
        code=e.kind,
        message=e.message,
        detail=str(cause) if cause is not None else None,
    )
    ctx.failure = failure
    ctx.properties[PROPERTY_ERROR_CODE] = e.kind.value
    ctx.properties[PROPERTY_ERROR_MESSAGE] = e.message
    ctx.properties[STATUS_CODE] = e.kind.http_status
    set_result_as_payload(ctx, failure)
    return failure


class Operation:
    """Base for pooled operations. Subclasses implement ``perform``."""

    name: str = ""

    def __init__(
        self,
        pool_manager: PoolManager | None = None,
        *,
        connector_id: str | None = None,
    ) -> None:
        self._pool_manager = pool_manager
        self._connector_id = connector_id

    @property
    def pool_manager(self) -> PoolManager:
        return self._pool_manager or get_pool_manager()

    @property
    def error_message(self) -> str:
        return f"Error occurred while performing {settings.CONNECTOR_NAME}:{self.name} operation."

    def connect(self, ctx: OperationContext) -> OperationContext:
        try:
            connection_name = get_connection_name(ctx)
            with self.pool_manager.connection(
                connection_name, connector_id=self._connector_id
            ) as conn:
                result = self.perform(ctx, conn)
            set_result_as_payload(ctx, result)
        except ConnectorError as e:
            self.handle_error(ctx, e)
        return ctx

    def perform(self, ctx: OperationContext, conn: PooledConnection) -> Any:
        raise NotImplementedError

    def handle_error(self, ctx: OperationContext, e: ConnectorError) -> None:
        """Set error to context and log it."""
        set_error(self.name, ctx, e)
        logger.error("%s %s", self.error_message, e.message, exc_info=e)
