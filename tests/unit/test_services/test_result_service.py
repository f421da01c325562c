"""Tests for booth result listing and CSV export."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.lib.importer import RawRow
from constituency_api.models import Constituency, ElectionYear
from constituency_api.services.result_import_service import import_booth_results
from constituency_api.services.result_service import export_booth_results_csv, list_booth_results


@pytest.fixture
async def imported(async_session: AsyncSession, election_year: ElectionYear, constituency: Constituency) -> None:
    rows = [
        RawRow(line=2, values={"constituency_id": 1, "booth_no": 12, "village_name": "Kavaraipettai",
                               "year": 2021, "polling_percentage": 81.2, "party_percentage": 44.0}),
        RawRow(line=3, values={"constituency_id": 1, "booth_no": 4, "village_name": "=cmd",
                               "year": 2021, "polling_percentage": 70.0, "party_percentage": None}),
    ]
    await import_booth_results(async_session, rows)


class TestListBoothResults:
    async def test_ordered_by_booth_no(self, async_session: AsyncSession, imported: None) -> None:
        results = await list_booth_results(async_session, 1, 2021)

        assert results is not None
        assert [r["booth_no"] for r in results] == [4, 12]
        assert results[1]["village_name"] == "Kavaraipettai"
        assert results[1]["polling_percentage"] == 81.2
        assert results[0]["party_percentage"] is None
        assert all(r["year"] == 2021 for r in results)

    async def test_unknown_year_returns_none(self, async_session: AsyncSession, imported: None) -> None:
        assert await list_booth_results(async_session, 1, 1999) is None

    async def test_other_constituency_empty(self, async_session: AsyncSession, imported: None) -> None:
        assert await list_booth_results(async_session, 2, 2021) == []


class TestExportBoothResultsCsv:
    async def test_renders_header_and_rows(self, async_session: AsyncSession, imported: None) -> None:
        text = await export_booth_results_csv(async_session, 1, 2021)

        assert text is not None
        lines = text.strip().split("\n")
        assert lines[0] == "booth_id,booth_no,village_name,year,polling_percentage,party_percentage"
        assert len(lines) == 3
        assert ",4,'=cmd,2021,70.0," in lines[1]

    async def test_nothing_to_export(self, async_session: AsyncSession, imported: None) -> None:
        assert await export_booth_results_csv(async_session, 2, 2021) is None
        assert await export_booth_results_csv(async_session, 1, 1999) is None
