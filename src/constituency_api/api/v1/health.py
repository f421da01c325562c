"""Liveness endpoint."""

from fastapi import APIRouter

from constituency_api.schemas.common import HealthResponse

health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service liveness. No authentication required."""
    return HealthResponse()
