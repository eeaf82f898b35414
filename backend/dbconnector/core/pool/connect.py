"""
DB connection factory for external connection profiles.

Uses psycopg (PostgreSQL), pymysql (MySQL), or trino (Trino) based on product_type.
Sessions are opened in autocommit mode: each operation runs exactly one statement.
"""

from typing import Any

import psycopg
import pymysql
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect

from dbconnector.core.config import settings
from dbconnector.models import ConnectionProfile, ProductTypeEnum

_DEFAULT_PORTS = {
    ProductTypeEnum.POSTGRES: 5432,
    ProductTypeEnum.MYSQL: 3306,
    ProductTypeEnum.TRINO: 8080,
}

# DB-API paramstyle per driver; statements are written with "?" and adapted.
PARAMSTYLES = {
    ProductTypeEnum.POSTGRES: "format",
    ProductTypeEnum.MYSQL: "format",
    ProductTypeEnum.TRINO: "qmark",
}

# Only MySQL treats a backslash inside a quoted literal as an escape character;
# PostgreSQL (standard_conforming_strings=on) and Trino take it literally.
_BACKSLASH_ESCAPES = frozenset({ProductTypeEnum.MYSQL})


def connect(profile: ConnectionProfile) -> Any:
    """
    Open a new DB-API connection for *profile*.

    Driver exceptions propagate unchanged; the pool wraps them.
    """
    pt = profile.product_type
    port = profile.port or _DEFAULT_PORTS[pt]
    password = profile.password if profile.password is not None else ""
    timeout = settings.EXTERNAL_DB_CONNECT_TIMEOUT

    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=profile.host,
            port=int(port),
            dbname=profile.database,
            user=profile.username,
            password=password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=profile.host,
            port=int(port),
            database=profile.database,
            user=profile.username,
            password=password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.TRINO:
        return trino_connect(
            host=profile.host,
            port=int(port),
            user=profile.username,
            auth=BasicAuthentication(profile.username, password) if password else None,
            catalog=profile.database,
            schema="default",
            source=settings.CONNECTOR_NAME,
            http_scheme="https" if profile.use_ssl else "http",
            request_timeout=timeout,
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def paramstyle_for(profile: ConnectionProfile) -> str:
    return PARAMSTYLES[profile.product_type]


def backslash_escapes_for(profile: ConnectionProfile) -> bool:
    return profile.product_type in _BACKSLASH_ESCAPES
