"""
Import engine: file parsing, column mapping and performance sheet pivoting.

Performance sheets come from review forms where each column header has the
shape ``"1. Inisiatif dan fleksibilitas [Employee Name]"`` and each row is
one reviewer's answers.
"""

import csv
import io
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from kinerja.core.config import get_config_value
from kinerja.core.logging import get_logger
from kinerja.imports.specs import ColumnDef, ImportSpec
from kinerja.scoring.ratings import string_rating_to_numeric
from kinerja.validation.specs import STAFF_OTHER

logger = get_logger("kinerja.imports")

_HEADER_NAME_RE = re.compile(r"\[(.*?)\]")
_LEADING_NUMBER_RE = re.compile(r"^\d+\s*[.]?\s*")
_BRACKET_RE = re.compile(r"\s*\[.*\]\s*")

EMPTY_SHEET_MESSAGE = "Data must have a header row and at least one data row."
NO_DATA_MESSAGE = (
    "No valid employee performance data could be parsed. Check that headers "
    "are in 'Competency [Employee Name]' format and data rows contain numeric scores."
)


# ---------------------------------------------------------------------------
# File parsing
# ---------------------------------------------------------------------------

def parse_file(file_bytes: bytes, filename: str) -> Tuple[List[str], List[List[str]]]:
    """Parse CSV or XLSX bytes into (headers, rows).

    Returns:
        Tuple of (header_list, row_list) where each row is a list of strings.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if ext == "csv":
        return _parse_csv(file_bytes)
    elif ext in ("xlsx", "xlsm"):
        return _parse_xlsx(file_bytes)
    else:
        raise ValueError(f"Unsupported file type: .{ext} (expected .csv or .xlsx)")


def read_file(path: Path) -> Tuple[List[str], List[List[str]]]:
    """Read and parse a CSV/XLSX file from disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return parse_file(path.read_bytes(), path.name)


def _parse_csv(data: bytes) -> Tuple[List[str], List[List[str]]]:
    # Try UTF-8 first, fall back to latin-1
    for enc in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            text = data.decode(enc)
            break
        except UnicodeDecodeError:
            continue
    else:
        text = data.decode("latin-1")

    rows_raw = list(csv.reader(io.StringIO(text)))

    if not rows_raw:
        raise ValueError("CSV file is empty")

    headers = [h.strip() for h in rows_raw[0]]
    rows = []
    for r in rows_raw[1:]:
        if any(cell.strip() for cell in r):  # skip blank rows
            padded = r + [""] * max(0, len(headers) - len(r))
            rows.append([c.strip() for c in padded[: len(headers)]])

    return headers, rows


def _parse_xlsx(data: bytes) -> Tuple[List[str], List[List[str]]]:
    from openpyxl import load_workbook

    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    ws = wb.active

    all_rows = []
    for row in ws.iter_rows(values_only=True):
        all_rows.append([_cell_text(c) for c in row])

    wb.close()

    if not all_rows:
        raise ValueError("XLSX file is empty")

    headers = all_rows[0]
    rows = [r for r in all_rows[1:] if any(c for c in r)]
    return headers, rows


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    # Whole-number floats come back from Excel as 75.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------

def auto_map_columns(headers: List[str], spec: ImportSpec) -> Dict[str, str]:
    """Auto-map file column indices to spec field names.

    Returns:
        Dict mapping str(column_index) -> field_name
    """
    mapping: Dict[str, str] = {}
    used_fields: set = set()

    for idx, header in enumerate(headers):
        h = header.lower().strip()
        if not h:
            continue

        for col_def in spec.columns:
            if col_def.name in used_fields:
                continue
            if h in col_def.all_names():
                mapping[str(idx)] = col_def.name
                used_fields.add(col_def.name)
                break

    return mapping


def validate_mapping(mapping: Dict[str, str], spec: ImportSpec) -> List[str]:
    """Return an error message for every required column that is not mapped."""
    mapped_fields = set(mapping.values())
    return [
        f"Required field '{col.label}' is not mapped"
        for col in spec.required_columns
        if col.name not in mapped_fields
    ]


def transform_rows(
    rows: List[List[str]], mapping: Dict[str, str], spec: ImportSpec
) -> List[Dict[str, Any]]:
    """Turn raw rows into dicts keyed by field name, coercing numeric columns."""
    col_map = spec.column_map
    records = []
    for row in rows:
        record: Dict[str, Any] = {}
        for col_idx_str, field_name in mapping.items():
            col_idx = int(col_idx_str)
            if col_idx >= len(row):
                continue
            record[field_name] = _coerce_value(row[col_idx], col_map.get(field_name))
        records.append(record)
    return records


def _coerce_value(raw: str, col_def: Optional[ColumnDef]) -> Any:
    if col_def is None or col_def.type == "text" or not raw:
        return raw
    try:
        if col_def.type == "int":
            return int(float(raw))
        if col_def.type == "float":
            return float(raw)
    except ValueError:
        return raw
    return raw


# ---------------------------------------------------------------------------
# Performance sheets
# ---------------------------------------------------------------------------

def extract_employee_name(header: str) -> Optional[str]:
    match = _HEADER_NAME_RE.search(header)
    return match.group(1).strip() if match else None


def clean_competency_name(header: str) -> str:
    """Strip the question number and the bracketed employee name from a header."""
    name = _LEADING_NUMBER_RE.sub("", header, count=1)
    return _BRACKET_RE.sub("", name, count=1).strip()


def convert_sheet_score(value: str) -> Optional[int]:
    """Convert a review form answer to a 0-100 score.

    Forms record 10 for "Kurang Baik", 65 and 75 as-is, and anything above
    75 as "Sangat Baik" (85). Rating words are accepted too. Returns None
    for blank or unreadable answers.
    """
    value = value.strip()
    if not value:
        return None

    rated = string_rating_to_numeric(value)
    if rated is not None:
        return rated

    match = re.match(r"^[+-]?\d+", value)
    if not match:
        return None
    score = int(match.group(0))
    if score == 10:
        return 65
    if score > 75:
        return 85
    return score


def parse_performance_sheet(
    headers: List[str],
    rows: List[List[str]],
    org_levels: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Pivot a review sheet into employee records.

    Every ``[Employee Name]`` column contributes one score per row; scores
    for the same employee and competency are averaged. Employees named in
    headers but without any readable score are dropped.

    Raises:
        ValueError: no data rows, or nothing could be parsed.
    """
    if not headers or not rows:
        raise ValueError(EMPTY_SHEET_MESSAGE)

    if org_levels is None:
        org_levels = get_config_value("imports", "org_level_overrides", default={}) or {}

    columns = []
    scores: Dict[str, Dict[str, List[int]]] = {}
    for idx, header in enumerate(headers):
        name = extract_employee_name(header)
        competency = clean_competency_name(header)
        if name and competency:
            columns.append((idx, name, competency))
            scores.setdefault(name, {})

    for row in rows:
        for idx, name, competency in columns:
            if idx >= len(row):
                continue
            score = convert_sheet_score(row[idx])
            if score is not None:
                scores[name].setdefault(competency, []).append(score)

    employees = []
    for name, by_competency in scores.items():
        if not by_competency:
            continue
        employees.append({
            "name": name,
            "nip": "",
            "gol": "",
            "pangkat": "",
            "position": "",
            "sub_position": "",
            "organizational_level": org_levels.get(name, STAFF_OTHER),
            "performance": [
                {"name": competency, "score": round(sum(values) / len(values), 2)}
                for competency, values in by_competency.items()
            ],
        })

    if not employees:
        raise ValueError(NO_DATA_MESSAGE)

    logger.info("Parsed performance sheet: %d employees from %d rows", len(employees), len(rows))
    return employees


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def load_json_records(path: Path) -> str:
    """Read a JSON upload as text, leaving decoding to the integrity checks."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_bytes().decode("utf-8-sig", errors="replace")


def load_employees(path: Path) -> List[Any]:
    """Load employee records from a JSON upload or a performance sheet.

    Raises:
        ValueError: the file cannot be decoded or holds no usable sheet data.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        text = load_json_records(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc
        return data if isinstance(data, list) else [data]

    headers, rows = read_file(path)
    return parse_performance_sheet(headers, rows)
