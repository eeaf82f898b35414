"""
Operation entry points invoked by the host.

Each operation reads named parameters from an OperationContext and writes back
either a JSON payload or an error code/message.
"""

from .base import Operation
from .context import OperationContext
from .execute import Execute
from .init import Init
from .query import Query
from .update import Update

__all__ = [
    "Operation",
    "OperationContext",
    "Init",
    "Query",
    "Update",
    "Execute",
]
