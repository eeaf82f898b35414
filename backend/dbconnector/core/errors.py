"""
Error taxonomy shared by the pool, the SQL engine and the operation boundary.

Every failure surfaced to a caller is one of three kinds. Callers branch on
``ConnectorError.kind`` instead of on the concrete exception class.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Caller-visible error codes."""

    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    OPERATION_ERROR = "OPERATION_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.INVALID_CONFIGURATION: 400,
    ErrorKind.OPERATION_ERROR: 500,
    ErrorKind.CONNECTION_ERROR: 503,
}


class ConnectorError(Exception):
    """Base class; the wrapped driver exception (if any) is ``__cause__``."""

    kind: ErrorKind = ErrorKind.OPERATION_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidConfigurationError(ConnectorError):
    """Missing or empty required input. Re-sending the same input will not help."""

    kind = ErrorKind.INVALID_CONFIGURATION


class OperationError(ConnectorError):
    """The backend rejected or failed the statement."""

    kind = ErrorKind.OPERATION_ERROR


class ConnectError(ConnectorError):
    """The pool could not obtain or validate a live connection."""

    kind = ErrorKind.CONNECTION_ERROR
