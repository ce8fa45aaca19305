"""
Organizational level categorization.

Free-text levels from uploads ("Es III", "Eselon 4", "Staff ASN Sek") are
reduced to one of Eselon II, Eselon III, Eselon IV, Staff or Other. A
golongan (civil-service rank such as "IV/a") is used when the level text
says nothing useful.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from kinerja.core.logging import get_logger

logger = get_logger("kinerja.scoring")

ESELON_II = "Eselon II"
ESELON_III = "Eselon III"
ESELON_IV = "Eselon IV"
STAFF = "Staff"
OTHER = "Other"

ESELON_CATEGORIES = (ESELON_II, ESELON_III, ESELON_IV)

ORGANIZATIONAL_LEVELS = [
    ESELON_II,
    ESELON_III,
    ESELON_IV,
    "Staff ASN Sekretariat",
    "Staff Non ASN Sekretariat",
    "Staff ASN Bidang Hukum",
    "Staff ASN Bidang Pemberdayaan Sosial",
    "Staff Non ASN Bidang Pemberdayaan Sosial",
    "Staff ASN Bidang Rehabilitasi Sosial",
    "Staff Non ASN Bidang Rehabilitasi Sosial",
    "Staff ASN Bidang Perlindungan dan Jaminan Sosial",
    "Staff Non ASN Bidang Perlindungan dan Jaminan Sosial",
    "Staff ASN Bidang Penanganan Bencana",
    "Staff Non ASN Bidang Penanganan Bencana",
]

_LEVEL_ABBREVIATIONS = {
    "es ii": "eselon ii",
    "es iii": "eselon iii",
    "es iv": "eselon iv",
    "esl ii": "eselon ii",
    "esl iii": "eselon iii",
    "esl iv": "eselon iv",
    "echelon": "eselon",
    "staff asn sek": "staff asn sekretariat",
    "staff non asn sek": "staff non asn sekretariat",
    "staff asn hukum": "staff asn bidang hukum",
    "staff asn pembsos": "staff asn bidang pemberdayaan sosial",
    "staff non asn pembsos": "staff non asn bidang pemberdayaan sosial",
    "staff asn rehsos": "staff asn bidang rehabilitasi sosial",
    "staff non asn rehsos": "staff non asn bidang rehabilitasi sosial",
    "staff asn perlindsos": "staff asn bidang perlindungan dan jaminan sosial",
    "staff non asn perlindsos": "staff non asn bidang perlindungan dan jaminan sosial",
    "staff asn bencana": "staff asn bidang penanganan bencana",
    "staff non asn bencana": "staff non asn bidang penanganan bencana",
}

# Checked highest level first; "iii" must not be read as "ii".
_ESELON_PATTERNS = [
    (ESELON_II, re.compile(r"\b(eselon|echelon|es|esl)\s*(ii|2)\b")),
    (ESELON_III, re.compile(r"\b(eselon|echelon|es|esl)\s*(iii|3)\b")),
    (ESELON_IV, re.compile(r"\b(eselon|echelon|es|esl)\s*(iv|4)\b")),
]

_POSITION_ABBREVIATIONS = [
    ("kep", "kepala"),
    ("mgr", "manager"),
    ("dir", "direktur"),
    ("ka bag", "kabag"),
    ("ka sub bag", "kasubag"),
    ("ka subbag", "kasubag"),
    ("pj", "penanggung jawab"),
    ("plt", "pelaksana tugas"),
    ("plh", "pelaksana harian"),
]

_LEADERSHIP_PATTERNS = [
    re.compile(p)
    for p in (
        r"\bkepala\b",
        r"\bmanager\b",
        r"\bdirekt(ur|or)\b",
        r"\bkabag\b",
        r"\bkasubag\b",
        r"\bpimpinan\b",
        r"\bkoordinator\b",
        r"\bsupervisor\b",
        r"\bpenanggung jawab\b",
        r"\bpelaksana tugas\b",
        r"\bpelaksana harian\b",
        r"\bwakil\b.*\b(kepala|direktur|manager)\b",
        r"\bassisten\b.*\b(direktur|manager)\b",
    )
]

_LEVEL_RANK = {ESELON_II: 4, ESELON_III: 3, ESELON_IV: 2, STAFF: 1, OTHER: 0}


# ---------------------------------------------------------------------------
# Golongan
# ---------------------------------------------------------------------------

_GOLONGAN_RE = re.compile(r"^(IV|III|II|I|4|3|2|1)[\s\-/]?([A-E])$")
_GOLONGAN_LEVELS = {"1": "I", "2": "II", "3": "III", "4": "IV",
                    "I": "I", "II": "II", "III": "III", "IV": "IV"}

GOLONGAN_NAMES = {
    "I/a": "Juru Muda",
    "I/b": "Juru Muda Tingkat I",
    "I/c": "Juru",
    "I/d": "Juru Tingkat I",
    "II/a": "Pengatur Muda",
    "II/b": "Pengatur Muda Tingkat I",
    "II/c": "Pengatur",
    "II/d": "Pengatur Tingkat I",
    "III/a": "Penata Muda",
    "III/b": "Penata Muda Tingkat I",
    "III/c": "Penata",
    "III/d": "Penata Tingkat I",
    "IV/a": "Pembina",
    "IV/b": "Pembina Tingkat I",
    "IV/c": "Pembina Utama Muda",
    "IV/d": "Pembina Utama Madya",
    "IV/e": "Pembina Utama",
}


@dataclass(frozen=True)
class Golongan:
    level: str
    grade: str

    @property
    def formatted(self) -> str:
        return f"{self.level}/{self.grade}"

    @property
    def display_name(self) -> str:
        return GOLONGAN_NAMES.get(self.formatted, self.formatted)


def parse_golongan(value: Any) -> Optional[Golongan]:
    """Parse "IV/a", "3-b", "II c" and similar. Returns None if unrecognized."""
    if not isinstance(value, str):
        return None
    match = _GOLONGAN_RE.match(value.strip().upper())
    if not match:
        return None
    return Golongan(_GOLONGAN_LEVELS[match.group(1)], match.group(2).lower())


def infer_eselon_from_golongan(value: Any) -> str:
    parsed = parse_golongan(value)
    if parsed is None:
        return STAFF
    if parsed.level == "IV" and parsed.grade in "cde":
        return ESELON_II
    if (parsed.level == "IV" and parsed.grade in "ab") or parsed.formatted == "III/d":
        return ESELON_III
    if parsed.level == "III" and parsed.grade in "bc":
        return ESELON_IV
    return STAFF


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

def normalize_organizational_level(level: Any) -> str:
    if not isinstance(level, str):
        return ""
    normalized = re.sub(r"\s+", " ", level.strip())
    return _LEVEL_ABBREVIATIONS.get(normalized.lower(), normalized)


def _match_eselon(text: str) -> Optional[str]:
    lower = text.lower()
    for category, pattern in _ESELON_PATTERNS:
        if pattern.search(lower):
            return category
    return None


def _categorize_text(level: Any) -> str:
    normalized = normalize_organizational_level(level)
    if not normalized:
        return OTHER

    eselon = _match_eselon(normalized)
    if eselon:
        return eselon

    lower = normalized.lower()
    if "staff" in lower or "staf" in lower:
        return STAFF
    return OTHER


def categorize_organizational_level(level: Any, golongan: Any = None) -> str:
    """Map a level string to Eselon II/III/IV, Staff or Other.

    Levels that say "unknown" / "tidak diketahui" are always Other. When
    the level text is unclear and a golongan is given, the golongan decides.
    """
    if isinstance(level, str):
        lower = level.lower()
        if "unknown" in lower or "tidak diketahui" in lower:
            return OTHER

    category = _categorize_text(level)

    if golongan and parse_golongan(golongan) is not None:
        inferred = infer_eselon_from_golongan(golongan)
        gap = _LEVEL_RANK[inferred] - _LEVEL_RANK[category]
        if category != OTHER and gap >= 2:
            logger.warning(
                "Golongan %s suggests %s but level indicates %s",
                golongan, inferred, category,
            )
        if category == OTHER:
            return inferred

    return category


def is_eselon_level(level: Any) -> bool:
    return categorize_organizational_level(level) in ESELON_CATEGORIES


def is_staff_level(level: Any) -> bool:
    return categorize_organizational_level(level) == STAFF


def is_valid_organizational_level(level: Any) -> bool:
    if not isinstance(level, str) or not level:
        return False
    normalized = normalize_organizational_level(level).lower()
    return any(valid.lower() == normalized for valid in ORGANIZATIONAL_LEVELS)


def simplify_organizational_level(level: Any, golongan: Any = None) -> str:
    """Two-bucket view: "Eselon" or "Staff"."""
    text = normalize_organizational_level(level).lower()
    if "eselon" in text:
        return "Eselon"
    if "staff" in text or "staf" in text:
        return "Staff"
    if golongan and infer_eselon_from_golongan(golongan) in ESELON_CATEGORIES:
        return "Eselon"
    return "Staff"


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------

def normalize_position(position: Any) -> str:
    if not isinstance(position, str):
        return ""
    normalized = re.sub(r"\s+", " ", position.strip()).lower()
    for abbrev, full in _POSITION_ABBREVIATIONS:
        normalized = re.sub(rf"\b{abbrev}\b", full, normalized)
    return normalized


def get_position_type(employee: Dict[str, Any]) -> str:
    """Return "eselon" for eselon levels or leadership positions, else "staff"."""
    if is_eselon_level(employee.get("organizational_level")):
        return "eselon"
    position = normalize_position(employee.get("position"))
    if any(pattern.search(position) for pattern in _LEADERSHIP_PATTERNS):
        return "eselon"
    return "staff"


def count_by_organizational_level(employees) -> Dict[str, int]:
    counts = {category: 0 for category in _LEVEL_RANK}
    for emp in employees:
        counts[categorize_organizational_level(emp.get("organizational_level"))] += 1
    return counts
