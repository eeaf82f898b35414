"""
HTTP adapter for the connection operations.

Flow: body -> OperationContext -> Operation.connect (blocking, run in a worker thread)
-> payload or error envelope. Status codes follow the error kind
(400 invalid configuration, 500 operation error, 503 connection error).
"""

import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from dbconnector.api.deps import PoolManagerDep
from dbconnector.operations import Execute, Init, Operation, OperationContext, Query, Update
from dbconnector.operations.context import (
    CONNECTION_NAME,
    EXECUTE_QUERY,
    PAYLOAD,
    QUERY,
    STATUS_CODE,
    UPDATE_QUERY,
)

router = APIRouter(tags=["connections"])


class QueryIn(BaseModel):
    query: str | None = None


class UpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    update_query: str | None = Field(default=None, alias="updateQuery")
    payload: dict[str, Any] | str | None = None


class ExecuteIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    execute_query: str | None = Field(default=None, alias="executeQuery")


class ConnectionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_type: str | None = Field(default=None, alias="productType")
    host: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    use_ssl: bool = Field(default=False, alias="useSsl")
    pool: dict[str, Any] | None = None
    replace: bool = False


def _error_response(ctx: OperationContext) -> JSONResponse:
    """Return envelope { success: false, code, message } for operation errors."""
    failure = ctx.failure
    body = {"success": False, "code": failure.code.value, "message": failure.message}
    return JSONResponse(status_code=ctx.properties[STATUS_CODE], content=body)


async def _run(operation: Operation, params: dict[str, Any]) -> JSONResponse:
    ctx = OperationContext(params)
    await asyncio.to_thread(operation.connect, ctx)
    if not ctx.succeeded:
        return _error_response(ctx)
    return JSONResponse(content=ctx.payload)


def _params(name: str, **values: Any) -> dict[str, Any]:
    return {CONNECTION_NAME: name, **values}


@router.put("/connections/{name}")
async def init_connection(name: str, body: ConnectionIn, pm: PoolManagerDep) -> JSONResponse:
    params = _params(
        name,
        productType=body.product_type,
        host=body.host,
        port=body.port,
        database=body.database,
        username=body.username,
        password=body.password,
        useSsl=body.use_ssl,
        pool=body.pool,
        replace=body.replace,
    )
    return await _run(Init(pm), params)


@router.post("/connections/{name}/query")
async def query(name: str, body: QueryIn, pm: PoolManagerDep) -> JSONResponse:
    return await _run(Query(pm), _params(name, **{QUERY: body.query}))


@router.post("/connections/{name}/update")
async def update(name: str, body: UpdateIn, pm: PoolManagerDep) -> JSONResponse:
    params = _params(name, **{UPDATE_QUERY: body.update_query, PAYLOAD: body.payload})
    return await _run(Update(pm), params)


@router.post("/connections/{name}/execute")
async def execute(name: str, body: ExecuteIn, pm: PoolManagerDep) -> JSONResponse:
    return await _run(Execute(pm), _params(name, **{EXECUTE_QUERY: body.execute_query}))


@router.delete("/connections/{name}")
def dispose_connection(name: str, pm: PoolManagerDep) -> dict[str, Any]:
    existed = pm.has_connection(name)
    pm.dispose(name)
    return {"success": existed, "message": None if existed else f"Connection '{name}' not found."}


@router.get("/pool/stats")
def pool_stats(pm: PoolManagerDep) -> dict[str, int]:
    return pm.stats()

