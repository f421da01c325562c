"""Booth result read and CSV export service."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.lib.exporter import DEFAULT_COLUMNS, render_csv
from constituency_api.models import Booth, BoothResult, ElectionYear
from constituency_api.services.reference_service import get_election_year


async def list_booth_results(session: AsyncSession, constituency_id: int, year: int) -> list[dict[str, Any]] | None:
    """Return a constituency's booth results for one election year.

    Args:
        session: Database session.
        constituency_id: Constituency id.
        year: Calendar year of the election.

    Returns:
        Result dicts ordered by booth number, or None if the year is unknown.
    """
    election_year = await get_election_year(session, year)
    if election_year is None:
        return None

    result = await session.execute(
        select(
            Booth.id.label("booth_id"),
            Booth.booth_no,
            Booth.village_name,
            ElectionYear.year,
            BoothResult.polling_percentage,
            BoothResult.party_percentage,
        )
        .join(BoothResult, BoothResult.booth_id == Booth.id)
        .join(ElectionYear, ElectionYear.id == BoothResult.year_id)
        .where(Booth.constituency_id == constituency_id, BoothResult.year_id == election_year.id)
        .order_by(Booth.booth_no)
    )
    return [dict(row._mapping) for row in result.all()]


async def export_booth_results_csv(session: AsyncSession, constituency_id: int, year: int) -> str | None:
    """Render a constituency's booth results for a year as CSV.

    Returns:
        CSV text, or None if there is nothing to export.
    """
    rows = await list_booth_results(session, constituency_id, year)
    if not rows:
        return None
    return render_csv(rows, columns=["booth_id", *DEFAULT_COLUMNS])
