import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from dbconnector.api.main import api_router
from dbconnector.core.config import settings
from dbconnector.core.errors import ErrorKind
from dbconnector.core.pool import get_pool_manager, shutdown_pool_manager

_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    get_pool_manager()
    yield
    shutdown_pool_manager()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Global exception handlers — standardized error response format
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with a human-readable message instead of raw Pydantic errors."""
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err.get("loc", []) if part != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "code": ErrorKind.INVALID_CONFIGURATION.value,
            "message": "; ".join(messages),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions — log and return 500 with safe message."""
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = "Internal server error"
    if settings.ENVIRONMENT == "local":
        message = f"Internal server error: {exc}"
    return JSONResponse(
        status_code=500,
        content={"success": False, "code": ErrorKind.OPERATION_ERROR.value, "message": message},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)
