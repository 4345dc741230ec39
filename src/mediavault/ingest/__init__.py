"""Public ingest exports for mediavault."""

from __future__ import annotations

from .csv_import import CsvRow, import_csv, import_rows, parse_csv

__all__ = ["CsvRow", "parse_csv", "import_rows", "import_csv"]
