"""
Performance recap scoring.

Each employee's competency scores (0-100) are weighted into three parts:

    perilaku kinerja    work behaviour, max 25.5
    kualitas kerja      work quality, max 42.5 (eselon) or 70 (staff)
    penilaian pimpinan  leadership assessment, 20% of a manual score, eselon only

The total is capped at 85.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from kinerja.core.config import get_config_value
from kinerja.core.logging import get_logger
from kinerja.scoring.orglevels import get_position_type
from kinerja.scoring.ratings import get_performance_rating
from kinerja.validation.specs import employee_name, performance_of

logger = get_logger("kinerja.scoring")

# (parameter, weight, extra search terms)
PERILAKU_PARAMETERS = [
    ("inisiatif dan fleksibilitas", 5, ("inisiatif", "fleksibilitas")),
    ("kehadiran dan ketepatan waktu", 5, ("kehadiran", "ketepatan", "waktu")),
    ("kerjasama dan team work", 5, ("kerjasama", "team", "teamwork")),
    ("manajemen waktu kerja", 5, ("manajemen", "waktu", "kerja")),
    ("kepemimpinan", 10, ("kepemimpinan", "leadership")),
]
PERILAKU_MAX = 25.5

_KUALITAS_TERMS = [
    ("kualitas kinerja", ("kualitas", "kinerja", "quality")),
    ("kemampuan berkomunikasi", ("komunikasi", "berkomunikasi", "communication")),
    ("pemahaman tentang permasalahan sosial", ("permasalahan", "sosial", "social")),
]
KUALITAS_WEIGHTS = {
    "eselon": [25.5, 8.5, 8.5],
    "staff": [42.5, 8.5, 8.5],
}
KUALITAS_MAX = {"eselon": 42.5, "staff": 70.0}


@dataclass
class PerformanceRecap:
    name: str
    position_type: str
    perilaku_kinerja: float
    kualitas_kerja: float
    penilaian_pimpinan: float
    total_nilai: float
    rating: str
    nip: str = ""
    organizational_level: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def find_competency_score(performance: Sequence[Dict[str, Any]], search_terms: Sequence[str]) -> float:
    """First score whose name contains a term, or is contained in one. 0 if none."""
    for term in search_terms:
        term = term.lower()
        for perf in performance:
            name = str(perf.get("name", "")).lower()
            if not name:
                continue
            if term in name or name in term:
                return _score(perf.get("score"))
    return 0.0


def calculate_perilaku_kinerja(performance: Sequence[Dict[str, Any]]) -> float:
    if not performance:
        return 0.0
    total = sum(
        find_competency_score(performance, (param,) + terms) / 100 * weight
        for param, weight, terms in PERILAKU_PARAMETERS
    )
    return round(min(total, PERILAKU_MAX), 2)


def calculate_kualitas_kerja(performance: Sequence[Dict[str, Any]], position_type: str) -> float:
    if not performance:
        return 0.0
    key = "eselon" if position_type == "eselon" else "staff"
    total = sum(
        find_competency_score(performance, (param,) + terms) / 100 * weight
        for (param, terms), weight in zip(_KUALITAS_TERMS, KUALITAS_WEIGHTS[key])
    )
    return round(min(total, KUALITAS_MAX[key]), 2)


def calculate_total_score(
    perilaku_kinerja: float,
    kualitas_kerja: float,
    penilaian_pimpinan: float,
    position_type: str,
) -> float:
    """Sum the weighted parts. ``penilaian_pimpinan`` is the raw 0-100 score."""
    weight = get_config_value("scoring", "leadership_weight", default=0.2)
    cap = get_config_value("scoring", "max_total_score", default=85)

    total = perilaku_kinerja + kualitas_kerja
    if position_type == "eselon":
        total += penilaian_pimpinan * weight
    return round(min(total, cap), 2)


def generate_employee_recap(
    employee: Dict[str, Any], leadership_score: Optional[float] = None
) -> PerformanceRecap:
    if leadership_score is None:
        leadership_score = get_config_value("scoring", "default_leadership_score", default=80)

    position_type = get_position_type(employee)
    performance = [p for p in performance_of(employee) if isinstance(p, dict)]
    perilaku = calculate_perilaku_kinerja(performance)
    kualitas = calculate_kualitas_kerja(performance, position_type)
    pimpinan = leadership_score if position_type == "eselon" else 0
    total = calculate_total_score(perilaku, kualitas, pimpinan, position_type)

    return PerformanceRecap(
        name=employee_name(employee) or "",
        position_type=position_type,
        perilaku_kinerja=perilaku,
        kualitas_kerja=kualitas,
        penilaian_pimpinan=pimpinan,
        total_nilai=total,
        rating=get_performance_rating(total),
        nip=str(employee.get("nip") or ""),
        organizational_level=str(employee.get("organizational_level") or ""),
    )


def generate_all_employee_recaps(
    employees: List[Dict[str, Any]],
    manual_scores: Optional[Dict[str, float]] = None,
) -> List[PerformanceRecap]:
    """Recap every employee, using ``manual_scores[name]`` as leadership score if present."""
    manual_scores = manual_scores or {}
    recaps = [
        generate_employee_recap(emp, manual_scores.get(employee_name(emp) or ""))
        for emp in employees
        if isinstance(emp, dict)
    ]
    logger.info("Generated %d performance recaps", len(recaps))
    return recaps
