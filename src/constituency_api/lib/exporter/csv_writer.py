"""CSV export writer for booth results."""

import csv
import io
from collections.abc import Iterable
from typing import Any

# Characters that trigger formula execution in spreadsheet applications
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")

DEFAULT_COLUMNS = [
    "booth_no",
    "village_name",
    "year",
    "polling_percentage",
    "party_percentage",
]


def _sanitize_cell(value: object) -> object:
    """Prefix formula-triggering string cells with a single quote."""
    if isinstance(value, str) and value and value[0] in _FORMULA_PREFIXES:
        return f"'{value}"
    return value


def render_csv(
    records: Iterable[dict[str, Any]],
    *,
    columns: list[str] | None = None,
) -> str:
    """Render result records as CSV text.

    Args:
        records: Iterable of result record dicts.
        columns: Column names to include. Defaults to DEFAULT_COLUMNS.

    Returns:
        The CSV document, header row first.
    """
    cols = columns or DEFAULT_COLUMNS
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=cols, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow({k: _sanitize_cell(v) for k, v in record.items()})
    return buffer.getvalue()
