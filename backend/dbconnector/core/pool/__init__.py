"""
DB connections and connection pool for named external connections.

No driver layer: psycopg, pymysql and trino are installed via pip; a ConnectionProfile is enough.
"""

from .connect import connect
from .connection import PooledConnection
from .health import health_check
from .manager import PoolManager, get_pool_manager, shutdown_pool_manager

__all__ = [
    "connect",
    "health_check",
    "PooledConnection",
    "PoolManager",
    "get_pool_manager",
    "shutdown_pool_manager",
]
