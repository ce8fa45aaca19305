"""
CSV export of performance recaps.

Cells are sanitized against spreadsheet formula injection before they
are written.
"""

import csv
from pathlib import Path
from typing import Any, List, Sequence

from kinerja.core.logging import get_logger
from kinerja.core.paths import ensure_directory
from kinerja.scoring.recap import PerformanceRecap

logger = get_logger("kinerja.imports")

FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r", "|")

RECAP_HEADERS = [
    "No",
    "Nama",
    "NIP",
    "Level Organisasi",
    "Tipe Jabatan",
    "Perilaku Kinerja",
    "Kualitas Kerja",
    "Penilaian Pimpinan",
    "Total Nilai",
    "Predikat",
]


def sanitize_csv_cell(value: Any) -> str:
    """Prefix a quote to values a spreadsheet would evaluate as a formula."""
    if value is None:
        return ""
    text = str(value)
    if text.startswith(FORMULA_PREFIXES):
        return f"'{text}"
    return text


def escape_csv_value(value: str) -> str:
    if "," in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def prepare_csv_cell(value: Any) -> str:
    return escape_csv_value(sanitize_csv_cell(value))


def recap_rows(recaps: Sequence[PerformanceRecap]) -> List[List[str]]:
    rows = []
    for number, recap in enumerate(recaps, start=1):
        cells = [
            number,
            recap.name,
            recap.nip,
            recap.organizational_level,
            recap.position_type,
            f"{recap.perilaku_kinerja:.2f}",
            f"{recap.kualitas_kerja:.2f}",
            f"{recap.penilaian_pimpinan:.2f}",
            f"{recap.total_nilai:.2f}",
            recap.rating,
        ]
        rows.append([sanitize_csv_cell(c) for c in cells])
    return rows


def recaps_to_csv(recaps: Sequence[PerformanceRecap], path: Path) -> Path:
    """Write recaps to ``path`` and return it."""
    path = Path(path)
    ensure_directory(path.parent)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(RECAP_HEADERS)
        writer.writerows(recap_rows(recaps))
    logger.info("Exported %d recaps to %s", len(recaps), path)
    return path
