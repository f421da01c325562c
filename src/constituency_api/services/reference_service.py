"""Reference data service — election years, constituencies and booths.

The booth-result import only reads years and constituencies; this service
is the administrative path that creates them.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.models import Booth, Constituency, ElectionYear
from constituency_api.schemas.reference import ConstituencyCreateRequest


class DuplicateReferenceError(ValueError):
    """Raised when creating a year or constituency that already exists."""


async def create_election_year(session: AsyncSession, year: int) -> ElectionYear:
    """Register an election year.

    Raises:
        DuplicateReferenceError: If the year already exists.
    """
    election_year = ElectionYear(year=year)
    session.add(election_year)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        msg = f"Election year {year} already exists"
        raise DuplicateReferenceError(msg) from exc
    await session.refresh(election_year)
    logger.info(f"Created election year {year} (id={election_year.id})")
    return election_year


async def list_election_years(session: AsyncSession) -> list[ElectionYear]:
    """Return all election years, oldest first."""
    result = await session.execute(select(ElectionYear).order_by(ElectionYear.year))
    return list(result.scalars().all())


async def get_election_year(session: AsyncSession, year: int) -> ElectionYear | None:
    """Look up an election year by its calendar year."""
    result = await session.execute(select(ElectionYear).where(ElectionYear.year == year))
    return result.scalar_one_or_none()


async def create_constituency(session: AsyncSession, request: ConstituencyCreateRequest) -> Constituency:
    """Register a constituency.

    Raises:
        DuplicateReferenceError: If a constituency with the same number exists.
    """
    constituency = Constituency(number=request.number, code=request.code, name=request.name)
    session.add(constituency)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        msg = f"Constituency number {request.number} already exists"
        raise DuplicateReferenceError(msg) from exc
    await session.refresh(constituency)
    logger.info(f"Created constituency {request.number} {request.name!r} (id={constituency.id})")
    return constituency


async def list_constituencies(session: AsyncSession) -> list[Constituency]:
    """Return all constituencies ordered by number."""
    result = await session.execute(select(Constituency).order_by(Constituency.number))
    return list(result.scalars().all())


async def get_constituency(session: AsyncSession, constituency_id: int) -> Constituency | None:
    """Get a constituency by id."""
    result = await session.execute(select(Constituency).where(Constituency.id == constituency_id))
    return result.scalar_one_or_none()


async def list_booths(session: AsyncSession, constituency_id: int) -> list[Booth]:
    """Return the booths of a constituency ordered by booth number."""
    result = await session.execute(
        select(Booth).where(Booth.constituency_id == constituency_id).order_by(Booth.booth_no)
    )
    return list(result.scalars().all())
