"""Booth result read/export endpoints.

GET /constituencies/{id}/results?year=YYYY — JSON results
GET /constituencies/{id}/results/export?year=YYYY — CSV download
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.core.dependencies import Principal, get_async_session, get_current_principal
from constituency_api.schemas.common import ErrorResponse
from constituency_api.schemas.results import BoothResultResponse
from constituency_api.services import result_service

results_router = APIRouter(prefix="/constituencies", tags=["results"])


@results_router.get(
    "/{constituency_id}/results",
    response_model=list[BoothResultResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_booth_results(
    constituency_id: int,
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    year: int = Query(description="Election year"),
) -> list[BoothResultResponse]:
    """List booth results of a constituency for one election year."""
    rows = await result_service.list_booth_results(session, constituency_id, year)
    if rows is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Election year {year} not found")
    return [BoothResultResponse(**row) for row in rows]


@results_router.get("/{constituency_id}/results/export", responses={404: {"model": ErrorResponse}})
async def export_booth_results(
    constituency_id: int,
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    year: int = Query(description="Election year"),
) -> Response:
    """Download booth results of a constituency for one election year as CSV."""
    csv_text = await result_service.export_booth_results_csv(session, constituency_id, year)
    if csv_text is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No results found")
    filename = f"booth_results_{constituency_id}_{year}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
