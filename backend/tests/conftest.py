from collections.abc import Generator
from unittest.mock import patch

import pytest

from dbconnector.core.pool import PoolManager
from dbconnector.models import PoolConfig
from tests.utils.fakedb import FakeDatabase, make_profile


@pytest.fixture
def fake_db() -> Generator[FakeDatabase, None, None]:
    db = FakeDatabase()
    with patch("dbconnector.core.pool.manager.connect", side_effect=db.connect):
        yield db


@pytest.fixture
def pool_manager(fake_db: FakeDatabase) -> Generator[PoolManager, None, None]:
    """PoolManager with one registered connection "wh" backed by fake_db."""
    pm = PoolManager(connector_id="test")
    pm.register(make_profile("wh", pool=PoolConfig(max_active=4, max_idle=4, max_wait_sec=1)))
    yield pm
    pm.dispose()
