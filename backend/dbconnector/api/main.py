from fastapi import APIRouter

from dbconnector.api.routes import operations

api_router = APIRouter()
api_router.include_router(operations.router)
