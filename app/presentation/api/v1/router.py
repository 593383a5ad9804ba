"""Router API v1 — agrega os sub-routers."""

from fastapi import APIRouter

from app.presentation.api.v1.endpoints.usuarios import router as usuarios_router

api_v1_router = APIRouter()

api_v1_router.include_router(usuarios_router, prefix="/users", tags=["👤 Usuários"])
