"""Exporter library public API."""

from constituency_api.lib.exporter.csv_writer import DEFAULT_COLUMNS, render_csv

__all__ = ["DEFAULT_COLUMNS", "render_csv"]
