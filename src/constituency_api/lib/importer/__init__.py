"""Importer library public API.

Provides spreadsheet parsing and row validation for booth-result imports.
"""

from constituency_api.lib.importer.reader import MalformedFileError, RawRow, normalize_header, read_spreadsheet
from constituency_api.lib.importer.validator import ImportRow, RowRejection, coerce_int, validate_row

__all__ = [
    "ImportRow",
    "MalformedFileError",
    "RawRow",
    "RowRejection",
    "coerce_int",
    "normalize_header",
    "read_spreadsheet",
    "validate_row",
]
