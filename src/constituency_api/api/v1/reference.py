"""Reference data API endpoints.

GET/POST /election-years
GET/POST /constituencies, GET /constituencies/{id}, GET /constituencies/{id}/booths
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.core.dependencies import Principal, get_async_session, get_current_principal, require_role
from constituency_api.schemas.common import ErrorResponse
from constituency_api.schemas.reference import (
    BoothResponse,
    ConstituencyCreateRequest,
    ConstituencyResponse,
    ElectionYearCreateRequest,
    ElectionYearResponse,
)
from constituency_api.services import reference_service
from constituency_api.services.reference_service import DuplicateReferenceError

election_years_router = APIRouter(prefix="/election-years", tags=["reference"])
constituencies_router = APIRouter(prefix="/constituencies", tags=["reference"])


@election_years_router.get("", response_model=list[ElectionYearResponse])
async def list_election_years(
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[ElectionYearResponse]:
    """List election years."""
    years = await reference_service.list_election_years(session)
    return [ElectionYearResponse.model_validate(y) for y in years]


@election_years_router.post(
    "",
    response_model=ElectionYearResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_election_year(
    request: ElectionYearCreateRequest,
    current_user: Annotated[Principal, Depends(require_role("admin"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionYearResponse:
    """Register an election year (admin only)."""
    try:
        year = await reference_service.create_election_year(session, request.year)
    except DuplicateReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ElectionYearResponse.model_validate(year)


@constituencies_router.get("", response_model=list[ConstituencyResponse])
async def list_constituencies(
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[ConstituencyResponse]:
    """List constituencies ordered by number."""
    constituencies = await reference_service.list_constituencies(session)
    return [ConstituencyResponse.model_validate(c) for c in constituencies]


@constituencies_router.post(
    "",
    response_model=ConstituencyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_constituency(
    request: ConstituencyCreateRequest,
    current_user: Annotated[Principal, Depends(require_role("admin"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ConstituencyResponse:
    """Register a constituency (admin only)."""
    try:
        constituency = await reference_service.create_constituency(session, request)
    except DuplicateReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ConstituencyResponse.model_validate(constituency)


@constituencies_router.get(
    "/{constituency_id}", response_model=ConstituencyResponse, responses={404: {"model": ErrorResponse}}
)
async def get_constituency(
    constituency_id: int,
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ConstituencyResponse:
    """Get a constituency by id."""
    constituency = await reference_service.get_constituency(session, constituency_id)
    if constituency is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Constituency not found")
    return ConstituencyResponse.model_validate(constituency)


@constituencies_router.get(
    "/{constituency_id}/booths", response_model=list[BoothResponse], responses={404: {"model": ErrorResponse}}
)
async def list_constituency_booths(
    constituency_id: int,
    current_user: Annotated[Principal, Depends(get_current_principal)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[BoothResponse]:
    """List the booths of a constituency."""
    constituency = await reference_service.get_constituency(session, constituency_id)
    if constituency is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Constituency not found")
    booths = await reference_service.list_booths(session, constituency_id)
    return [BoothResponse.model_validate(b) for b in booths]
