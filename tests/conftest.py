"""Shared test fixtures for async database, sessions, reference data, and auth tokens."""

import io
from collections.abc import AsyncGenerator, Callable

import pandas as pd
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import constituency_api.models  # noqa: F401
from constituency_api.core.config import Settings
from constituency_api.core.database import enable_sqlite_foreign_keys
from constituency_api.core.security import create_access_token
from constituency_api.models import Constituency, ElectionYear
from constituency_api.models.base import Base

RESULT_COLUMNS = ["constituency_id", "booth_no", "village_name", "year", "polling_percentage", "party_percentage"]


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-not-for-production",
        jwt_algorithm="HS256",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with foreign keys enforced."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def election_year(async_session: AsyncSession) -> ElectionYear:
    """ElectionYear 2021."""
    year = ElectionYear(year=2021)
    async_session.add(year)
    await async_session.commit()
    await async_session.refresh(year)
    return year


@pytest.fixture
async def constituency(async_session: AsyncSession) -> Constituency:
    """Constituency with id 1."""
    item = Constituency(id=1, number=1, code="AC001", name="Gummidipoondi")
    async_session.add(item)
    await async_session.commit()
    await async_session.refresh(item)
    return item


@pytest.fixture
def make_xlsx() -> Callable[[list[dict]], bytes]:
    """Build an .xlsx workbook (single sheet) from row dicts."""

    def _make(rows: list[dict], columns: list[str] | None = None) -> bytes:
        buffer = io.BytesIO()
        pd.DataFrame(rows, columns=columns or RESULT_COLUMNS).to_excel(buffer, index=False)
        return buffer.getvalue()

    return _make


@pytest.fixture
def admin_token(settings: Settings) -> str:
    """Generate a JWT access token for an admin."""
    return create_access_token(
        subject="1",
        role="admin",
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def viewer_token(settings: Settings) -> str:
    """Generate a JWT access token for a non-admin member."""
    return create_access_token(
        subject="2",
        role="member",
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
