"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from constituency_api.api.middleware import SecurityHeadersMiddleware, setup_cors
from constituency_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from constituency_api.api.v1.health import health_router
    from constituency_api.api.v1.imports import imports_router
    from constituency_api.api.v1.reference import constituencies_router, election_years_router
    from constituency_api.api.v1.results import results_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(health_router)
    root_router.include_router(imports_router)
    root_router.include_router(election_years_router)
    root_router.include_router(constituencies_router)
    root_router.include_router(results_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.environment == "production")
