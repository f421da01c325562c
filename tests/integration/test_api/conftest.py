"""Fixtures for API tests: routers mounted on a bare app over the SQLite test database."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from constituency_api.api.v1.imports import imports_router
from constituency_api.api.v1.reference import constituencies_router, election_years_router
from constituency_api.api.v1.results import results_router
from constituency_api.core.config import Settings, get_settings
from constituency_api.core.dependencies import get_async_session
from constituency_api.models import Constituency, ElectionYear


@pytest.fixture
def app(settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """FastAPI app with the v1 routers and a real per-request session."""
    app = FastAPI()
    app.include_router(imports_router, prefix="/api/v1")
    app.include_router(election_years_router, prefix="/api/v1")
    app.include_router(constituencies_router, prefix="/api/v1")
    app.include_router(results_router, prefix="/api/v1")

    async def _session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """ElectionYear 2021 and constituency 1, committed and released."""
    async with session_factory() as session:
        session.add(ElectionYear(year=2021))
        session.add(Constituency(id=1, number=1, code="AC001", name="Gummidipoondi"))
        await session.commit()


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def viewer_headers(viewer_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {viewer_token}"}
