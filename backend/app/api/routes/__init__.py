"""API route registrations."""
from fastapi import APIRouter

from app.api.routes import health, proxy


api_router = APIRouter()
api_router.include_router(health.router)
# Catch-all, must stay last.
api_router.include_router(proxy.router)

__all__ = ["api_router"]
