"""
Router principal de la API v1.
Agrupa todos los endpoints de la version 1.
"""
from fastapi import APIRouter

from dashboard.api.v1.endpoints import monday


# Router principal de la API v1
api_router = APIRouter(prefix="/v1")

api_router.include_router(monday.router)
