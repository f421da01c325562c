"""Pydantic v2 schemas for booth result reads."""

from pydantic import BaseModel


class BoothResultResponse(BaseModel):
    """One booth's result for an election year."""

    booth_id: int
    booth_no: int
    village_name: str | None = None
    year: int
    polling_percentage: float | None = None
    party_percentage: float | None = None
