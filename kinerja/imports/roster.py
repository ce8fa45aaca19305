"""
Employee roster import.

A roster sheet carries the profile fields a performance sheet lacks (NIP,
golongan, pangkat, position, organizational level). Rows are matched to
employee records by name.
"""

import re
from typing import Any, Dict, List

from kinerja.core.logging import get_logger
from kinerja.imports.engine import auto_map_columns, transform_rows, validate_mapping
from kinerja.imports.specs import ColumnDef, ImportSpec

logger = get_logger("kinerja.imports")


# ---------------------------------------------------------------------------
# Column definitions
# ---------------------------------------------------------------------------

ROSTER_COLUMNS = [
    ColumnDef(
        name="name", label="Nama", required=True,
        aliases=["nama pegawai", "nama lengkap", "employee name", "employee",
                 "full name"],
    ),
    ColumnDef(
        name="nip", label="NIP",
        aliases=["nip pegawai", "nomor induk pegawai", "employee id", "id"],
    ),
    ColumnDef(
        name="gol", label="Golongan",
        aliases=["gol", "gol.", "gol/ruang", "golongan/ruang", "grade"],
    ),
    ColumnDef(
        name="pangkat", label="Pangkat",
        aliases=["rank", "pangkat/golongan"],
    ),
    ColumnDef(
        name="position", label="Jabatan",
        aliases=["position", "job title", "title"],
    ),
    ColumnDef(
        name="sub_position", label="Sub Jabatan",
        aliases=["sub position", "subposition", "bidang", "unit", "unit kerja",
                 "seksi"],
    ),
    ColumnDef(
        name="organizational_level", label="Level Organisasi",
        aliases=["organizational level", "org level", "level", "eselon",
                 "tingkat"],
    ),
]

ROSTER_SPEC = ImportSpec(name="roster", label="Employee Roster", columns=ROSTER_COLUMNS)

PROFILE_FIELDS = ["nip", "gol", "pangkat", "position", "sub_position", "organizational_level"]


def roster_key(name: Any) -> str:
    """Case- and whitespace-insensitive lookup key for an employee name."""
    if not isinstance(name, str):
        return ""
    return re.sub(r"\s+", " ", name).strip().casefold()


def parse_roster(headers: List[str], rows: List[List[str]]) -> Dict[str, Dict[str, Any]]:
    """Map roster rows to ``{roster_key(name): record}``.

    Raises:
        ValueError: required columns could not be found in the headers.
    """
    mapping = auto_map_columns(headers, ROSTER_SPEC)
    errors = validate_mapping(mapping, ROSTER_SPEC)
    if errors:
        raise ValueError("; ".join(errors))

    roster: Dict[str, Dict[str, Any]] = {}
    for record in transform_rows(rows, mapping, ROSTER_SPEC):
        key = roster_key(record.get("name"))
        if key:
            roster[key] = record

    logger.info("Parsed roster: %d employees", len(roster))
    return roster


def apply_roster(
    employees: List[Dict[str, Any]], roster: Dict[str, Dict[str, Any]]
) -> int:
    """Fill profile fields from the roster in place. Returns matched count.

    Only non-empty roster values overwrite the employee's fields.
    """
    matched = 0
    for emp in employees:
        entry = roster.get(roster_key(emp.get("name")))
        if entry is None:
            continue
        matched += 1
        for field_name in PROFILE_FIELDS:
            value = entry.get(field_name)
            if value not in (None, ""):
                emp[field_name] = value

    unmatched = len(employees) - matched
    if unmatched:
        logger.warning("%d employees not found in roster", unmatched)
    return matched
