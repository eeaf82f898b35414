"""
Init operation: register a connection profile under a name.

Registration is idempotent: a name that already exists keeps its profile and pool
unless ``replace`` is requested.
"""

from typing import Any

from pydantic import ValidationError

from dbconnector.core.errors import ConnectorError, InvalidConfigurationError
from dbconnector.models import ConnectionProfile, OperationResult

from .base import Operation, get_connection_name, set_result_as_payload
from .context import OperationContext

# Context parameter -> ConnectionProfile field
_PROFILE_PARAMS = {
    "productType": "product_type",
    "host": "host",
    "port": "port",
    "database": "database",
    "username": "username",
    "password": "password",
    "useSsl": "use_ssl",
    "pool": "pool",
}


def _format_validation_error(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages)


class Init(Operation):
    name = "init"

    def connect(self, ctx: OperationContext) -> OperationContext:
        try:
            profile = self.build_profile(ctx)
            replace = bool(ctx.get_parameter("replace"))
            created = self.pool_manager.register(
                profile, connector_id=self._connector_id, replace=replace
            )
            message = (
                f"Connection '{profile.name}' registered."
                if created
                else f"Connection '{profile.name}' already exists."
            )
            set_result_as_payload(
                ctx, OperationResult(operation=self.name, success=True, message=message)
            )
        except ConnectorError as e:
            self.handle_error(ctx, e)
        return ctx

    @staticmethod
    def build_profile(ctx: OperationContext) -> ConnectionProfile:
        data: dict[str, Any] = {"name": get_connection_name(ctx)}
        for param, field_name in _PROFILE_PARAMS.items():
            value = ctx.get_parameter(param)
            if value is not None and value != "":
                data[field_name] = value
        try:
            return ConnectionProfile.model_validate(data)
        except ValidationError as e:
            raise InvalidConfigurationError(
                f"Invalid connection configuration: {_format_validation_error(e)}"
            ) from e
