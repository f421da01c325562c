"""FastAPI application factory and process lifespan."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from constituency_api.core.config import get_settings
from constituency_api.core.database import dispose_engine, init_engine
from constituency_api.core.logging import setup_logging

OPENAPI_TAGS = [
    {"name": "imports", "description": "Bulk booth-result upload (admin)"},
    {"name": "reference", "description": "Election years, constituencies and booths"},
    {"name": "results", "description": "Booth results by constituency and year, JSON or CSV"},
    {"name": "health", "description": "Liveness"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Open the connection pool on startup and close it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    logger.info(f"Constituency API started ({settings.environment})")

    yield

    await dispose_engine()
    logger.info("Constituency API stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Constituency API",
        description="Constituencies, polling booths and per-booth election results, with spreadsheet import",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    from constituency_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
