"""Unit tests for core.config.Settings."""

import json

import pytest

from dbconnector.core.config import Settings
from dbconnector.models import ProductTypeEnum


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.API_V1_STR == "/api/v1"
    assert s.CONNECTOR_NAME == "dbconnector"
    assert s.EXTERNAL_DB_POOL_MAX_ACTIVE >= 1
    assert s.EXTERNAL_DB_CONNECTIONS == []


def test_connections_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    profiles = [
        {
            "name": "warehouse",
            "product_type": "trino",
            "host": "trino.internal",
            "port": 8080,
            "database": "hive",
            "username": "etl",
            "pool": {"max_active": 2},
        }
    ]
    monkeypatch.setenv("EXTERNAL_DB_CONNECTIONS", json.dumps(profiles))
    monkeypatch.setenv("EXTERNAL_DB_POOL_SIZE", "3")

    s = Settings(_env_file=None)

    assert s.EXTERNAL_DB_POOL_SIZE == 3
    [profile] = s.EXTERNAL_DB_CONNECTIONS
    assert profile.name == "warehouse"
    assert profile.product_type is ProductTypeEnum.TRINO
    assert profile.pool.max_active == 2
    assert profile.pool.max_idle is None
