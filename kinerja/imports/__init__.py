"""
File ingestion: performance sheets, rosters, JSON uploads and CSV export.

Usage:
    from kinerja.imports import read_file, parse_performance_sheet
    headers, rows = read_file(Path("penilaian.csv"))
    employees = parse_performance_sheet(headers, rows)
"""

from kinerja.imports.engine import (
    auto_map_columns,
    load_employees,
    load_json_records,
    parse_file,
    parse_performance_sheet,
    read_file,
)
from kinerja.imports.export import recaps_to_csv, sanitize_csv_cell
from kinerja.imports.roster import apply_roster, parse_roster
from kinerja.imports.specs import ColumnDef, ImportSpec

__all__ = [
    "auto_map_columns",
    "load_employees",
    "load_json_records",
    "parse_file",
    "parse_performance_sheet",
    "read_file",
    "recaps_to_csv",
    "sanitize_csv_cell",
    "apply_roster",
    "parse_roster",
    "ColumnDef",
    "ImportSpec",
]
