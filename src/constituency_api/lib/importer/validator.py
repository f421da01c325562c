"""Row validation and normalization for booth-result imports.

Turns a loosely-typed ``RawRow`` into a strict ``ImportRow`` or a
``RowRejection``. A bad row never raises; the caller counts and skips it.
"""

import math
import re
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from constituency_api.lib.importer.reader import RawRow

REQUIRED_INT_FIELDS = ("constituency_id", "booth_no", "year")
PERCENTAGE_FIELDS = ("polling_percentage", "party_percentage")

# Only well-formed thousands grouping; a decimal comma such as "72,5" is not a number.
_GROUPED_NUMBER = re.compile(r"[+-]?\d{1,3}(?:,\d{3})+(?:\.\d+)?")


class ImportRow(BaseModel):
    """Validated shape of one booth-result row."""

    model_config = ConfigDict(frozen=True)

    line: int
    constituency_id: int
    booth_no: int
    village_name: str | None = None
    year: int
    polling_percentage: float | None = None
    party_percentage: float | None = None


@dataclass(frozen=True)
class RowRejection:
    """A row that failed validation, with the spreadsheet line and reason."""

    line: int
    reason: str


def _to_number(value: Any) -> float | None:
    """Convert a cell to a finite float, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if "," in text:
            if not _GROUPED_NUMBER.fullmatch(text):
                return None
            text = text.replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(number):
        return None
    return number


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_int(value: Any) -> int | None:
    """Return the integer value of a cell, or None if it is missing or not integer-valued."""
    number = _to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def validate_row(raw: RawRow) -> ImportRow | RowRejection:
    """Validate and normalize a single raw row.

    ``constituency_id``, ``booth_no`` and ``year`` must be present and
    integer-valued. ``village_name`` and the percentage columns are optional;
    percentages are passed through without range checks.

    Args:
        raw: The raw spreadsheet row.

    Returns:
        An ``ImportRow`` on success, otherwise a ``RowRejection``.
    """
    ints: dict[str, int] = {}
    for field_name in REQUIRED_INT_FIELDS:
        value = raw.get(field_name)
        if _is_blank(value):
            return RowRejection(line=raw.line, reason=f"Missing required field: {field_name}")
        coerced = coerce_int(value)
        if coerced is None:
            return RowRejection(line=raw.line, reason=f"Invalid {field_name}: {value!r}")
        ints[field_name] = coerced

    percentages: dict[str, float | None] = {}
    for field_name in PERCENTAGE_FIELDS:
        value = raw.get(field_name)
        if _is_blank(value):
            percentages[field_name] = None
            continue
        number = _to_number(value)
        if number is None:
            return RowRejection(line=raw.line, reason=f"Invalid {field_name}: {value!r}")
        percentages[field_name] = number

    village = raw.get("village_name")
    village_name = None if _is_blank(village) else str(village).strip()

    return ImportRow(line=raw.line, village_name=village_name, **ints, **percentages)
