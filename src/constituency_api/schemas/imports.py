"""Booth-result import Pydantic v2 response schemas."""

from pydantic import BaseModel, Field


class SkippedRow(BaseModel):
    """A spreadsheet row that was skipped, with the reason."""

    line: int = Field(description="1-based spreadsheet line (header is line 1)")
    reason: str


class ImportSummary(BaseModel):
    """Outcome of a committed booth-result import."""

    success: bool = True
    total_rows: int = Field(default=0, description="Data rows read from the file")
    imported: int = Field(default=0, description="Rows upserted into booth_results")
    skipped: int = Field(default=0, description="Rows skipped by validation or unknown year")
    booths_created: int = Field(default=0, description="Booths created during this import")
    skipped_rows: list[SkippedRow] = Field(default_factory=list)


class ImportFailureResponse(BaseModel):
    """Body returned when the import transaction was rolled back."""

    message: str
    error: str
