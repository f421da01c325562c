"""Pydantic v2 schemas for election years, constituencies and booths."""

from datetime import datetime

from pydantic import BaseModel, Field


class ElectionYearCreateRequest(BaseModel):
    """Request body for registering an election year."""

    year: int = Field(ge=1900, le=2200)


class ElectionYearResponse(BaseModel):
    """An election year."""

    model_config = {"from_attributes": True}

    id: int
    year: int
    created_at: datetime


class ConstituencyCreateRequest(BaseModel):
    """Request body for registering a constituency."""

    number: int = Field(gt=0)
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=200)


class ConstituencyResponse(BaseModel):
    """A constituency."""

    model_config = {"from_attributes": True}

    id: int
    number: int
    code: str
    name: str


class BoothResponse(BaseModel):
    """A polling booth."""

    model_config = {"from_attributes": True}

    id: int
    constituency_id: int
    booth_no: int
    village_name: str | None = None
