"""API v1 router registration."""

from fastapi import APIRouter

from gestao_milhas.api.routes import cedentes, compras

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(cedentes.router)
v1_router.include_router(compras.router)
