"""
Per-call context exchanged with the host: named parameters in, payload/properties out.
"""

from collections.abc import Mapping
from typing import Any

from dbconnector.models import OperationFailure

CONNECTION_NAME = "name"
QUERY = "query"
EXECUTE_QUERY = "executeQuery"
UPDATE_QUERY = "updateQuery"
PAYLOAD = "payload"

PROPERTY_ERROR_CODE = "ERROR_CODE"
PROPERTY_ERROR_MESSAGE = "ERROR_MESSAGE"
STATUS_CODE = "HTTP_SC"
JSON_CONTENT_TYPE = "application/json"


class OperationContext:
    """Mutable request/response holder for one operation call. Not shared between threads."""

    def __init__(
        self,
        params: Mapping[str, Any] | None = None,
        *,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        self.params: dict[str, Any] = dict(params or {})
        self.properties: dict[str, Any] = dict(properties or {})
        self.payload: Any = None
        self.content_type: str | None = None
        self.failure: OperationFailure | None = None

    def get_parameter(self, name: str) -> Any:
        return self.params.get(name)

    @property
    def succeeded(self) -> bool:
        return self.failure is None
