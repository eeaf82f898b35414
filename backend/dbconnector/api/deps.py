from typing import Annotated

from fastapi import Depends

from dbconnector.core.pool import PoolManager, get_pool_manager

PoolManagerDep = Annotated[PoolManager, Depends(get_pool_manager)]
