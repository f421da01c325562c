"""Spreadsheet reader for booth-result uploads.

Parses an uploaded Excel workbook (first sheet) or CSV file into a lazy,
one-shot sequence of ``RawRow`` records. No type coercion happens here:
cell values are passed through as pandas produced them, with empty cells
mapped to ``None``.
"""

import io
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

import pandas as pd
from loguru import logger

_CSV_CONTENT_TYPES = frozenset({"text/csv", "application/csv", "text/plain"})
_EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm", ".xls"})

# Header row is spreadsheet line 1, so the first data row is line 2.
_FIRST_DATA_LINE = 2


class MalformedFileError(ValueError):
    """Raised when uploaded bytes cannot be parsed as a spreadsheet."""


@dataclass(frozen=True)
class RawRow:
    """One untyped spreadsheet row keyed by normalized column header."""

    line: int
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


def normalize_header(header: object) -> str:
    """Normalize a column header: trim, lower-case, collapse whitespace to ``_``.

    Args:
        header: Raw header cell value.

    Returns:
        The normalized header string.
    """
    return re.sub(r"\s+", "_", str(header).strip().lower())


def _is_csv(filename: str | None, content_type: str | None) -> bool:
    # The file extension outranks the declared MIME type.
    suffix = PurePath(filename).suffix.lower() if filename else ""
    if suffix == ".csv":
        return True
    if suffix in _EXCEL_SUFFIXES:
        return False
    return bool(content_type) and content_type.split(";")[0].strip().lower() in _CSV_CONTENT_TYPES


def _load_frame(content: bytes, *, as_csv: bool) -> pd.DataFrame:
    buffer = io.BytesIO(content)
    if as_csv:
        return pd.read_csv(buffer, dtype=object, keep_default_na=True, skip_blank_lines=False)
    # sheet_name=0 selects the first sheet regardless of its name
    return pd.read_excel(buffer, sheet_name=0, dtype=object)


def _iter_rows(frame: pd.DataFrame) -> Iterator[RawRow]:
    # Blank lines are kept by the parsers and removed by dropna, which keeps
    # the index, so it still maps back to the file line.
    for position, record in zip(frame.index, frame.to_dict("records"), strict=True):
        values = {k: (None if pd.isna(v) else v) for k, v in record.items()}
        yield RawRow(line=int(position) + _FIRST_DATA_LINE, values=values)


def read_spreadsheet(
    content: bytes,
    filename: str | None = None,
    content_type: str | None = None,
) -> Iterator[RawRow]:
    """Parse uploaded spreadsheet bytes into raw rows.

    Parsing happens eagerly so that a malformed upload is reported before
    any database work starts; iteration over the result is lazy.

    Args:
        content: Raw bytes of the uploaded file.
        filename: Original filename, used to pick the CSV parser for ``.csv``.
        content_type: Declared MIME type of the upload.

    Returns:
        A one-shot iterator of ``RawRow`` in file order.

    Raises:
        MalformedFileError: If the bytes cannot be parsed as a spreadsheet.
    """
    if not content:
        return iter(())

    as_csv = _is_csv(filename, content_type)
    try:
        frame = _load_frame(content, as_csv=as_csv)
    except pd.errors.EmptyDataError:
        return iter(())
    except Exception as exc:
        logger.warning(f"Could not parse upload {filename!r} as {'CSV' if as_csv else 'Excel'}: {exc}")
        msg = f"Invalid spreadsheet file: {exc}"
        raise MalformedFileError(msg) from exc

    frame.columns = [normalize_header(c) for c in frame.columns]
    frame = frame.dropna(how="all")
    logger.debug(f"Parsed {filename!r}: {len(frame)} data rows, columns={list(frame.columns)}")
    return _iter_rows(frame)
