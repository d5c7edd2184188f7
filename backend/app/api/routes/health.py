"""Liveness endpoint for load balancers."""
from fastapi import APIRouter

from app.schemas.proxy import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health information for monitoring and load-balancers."""
    return HealthResponse()
