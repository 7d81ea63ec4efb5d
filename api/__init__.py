"""FastAPI router aggregation."""

from fastapi import APIRouter

from api.editors import router as editors_router
from api.components import router as components_router
from api.switches import router as switches_router
from api.expression_rows import router as expression_rows_router
from api.connections import router as connections_router
from api.expressions import router as expressions_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(editors_router, tags=["editors"])
api_router.include_router(components_router, prefix="/editors", tags=["components"])
api_router.include_router(switches_router, prefix="/editors", tags=["switches"])
api_router.include_router(expression_rows_router, prefix="/editors", tags=["expression-rows"])
api_router.include_router(connections_router, prefix="/editors", tags=["connections"])
api_router.include_router(expressions_router, prefix="/expressions", tags=["expressions"])
