"""
Unit tests for core.pool.connect and core.pool.health.

Driver entry points are patched; no live database is needed.
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from dbconnector.core.pool import PooledConnection, connect, health_check
from dbconnector.core.pool.connect import paramstyle_for
from dbconnector.models import ProductTypeEnum
from tests.utils.fakedb import FakeDatabase, make_profile


@patch("dbconnector.core.pool.connect.settings")
@patch("dbconnector.core.pool.connect.psycopg")
def test_connect_postgres(mock_psycopg: MagicMock, mock_settings: MagicMock) -> None:
    mock_settings.EXTERNAL_DB_CONNECT_TIMEOUT = 7
    profile = make_profile(product_type=ProductTypeEnum.POSTGRES, port=None)

    conn = connect(profile)

    assert conn is mock_psycopg.connect.return_value
    mock_psycopg.connect.assert_called_once_with(
        host="localhost",
        port=5432,
        dbname="db",
        user="u",
        password="p",
        connect_timeout=7,
        autocommit=True,
    )


@patch("dbconnector.core.pool.connect.pymysql")
def test_connect_mysql_default_port(mock_pymysql: MagicMock) -> None:
    profile = make_profile(product_type=ProductTypeEnum.MYSQL, port=None)

    connect(profile)

    kwargs = mock_pymysql.connect.call_args.kwargs
    assert kwargs["port"] == 3306
    assert kwargs["database"] == "db"
    assert kwargs["autocommit"] is True


@patch("dbconnector.core.pool.connect.BasicAuthentication")
@patch("dbconnector.core.pool.connect.trino_connect")
def test_connect_trino_https(mock_trino: MagicMock, mock_auth: MagicMock) -> None:
    profile = make_profile(
        product_type=ProductTypeEnum.TRINO, port=8443, use_ssl=True, database="hive"
    )

    connect(profile)

    kwargs = mock_trino.call_args.kwargs
    assert kwargs["catalog"] == "hive"
    assert kwargs["http_scheme"] == "https"
    assert kwargs["auth"] is mock_auth.return_value
    mock_auth.assert_called_once_with("u", "p")


def test_trino_ssl_requires_password() -> None:
    with pytest.raises(ValidationError, match="Password is required"):
        make_profile(product_type=ProductTypeEnum.TRINO, use_ssl=True, password="")


def test_paramstyle_per_product() -> None:
    assert paramstyle_for(make_profile(product_type=ProductTypeEnum.POSTGRES)) == "format"
    assert paramstyle_for(make_profile(product_type=ProductTypeEnum.MYSQL)) == "format"
    assert paramstyle_for(make_profile(product_type=ProductTypeEnum.TRINO)) == "qmark"


def test_health_check() -> None:
    db = FakeDatabase()
    conn = db.connect(make_profile())
    assert health_check(conn) is True
    conn.alive = False
    assert health_check(conn) is False


def test_pooled_connection_close_is_idempotent() -> None:
    db = FakeDatabase()
    pooled = PooledConnection(db.connect(make_profile()), ("test", "wh"))
    assert pooled.is_valid() is True
    pooled.close()
    pooled.close()
    assert pooled.closed is True
    assert pooled.is_valid() is False
    assert db.live == 0


def test_pooled_connection_close_failure_swallowed() -> None:
    handle = MagicMock()
    handle.close.side_effect = RuntimeError("already gone")
    pooled = PooledConnection(handle, ("test", "wh"))
    pooled.close()
    assert pooled.closed is True
