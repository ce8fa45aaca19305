"""
Recap scoring: organizational levels, rating labels and weighted totals.

Usage:
    from kinerja.scoring import generate_all_employee_recaps
    recaps = generate_all_employee_recaps(employees, {"Budi": 90})
"""

from kinerja.scoring.orglevels import (
    categorize_organizational_level,
    get_position_type,
    is_eselon_level,
)
from kinerja.scoring.ratings import (
    STRING_RATING_MAP,
    get_performance_rating,
    get_rating_label,
    string_rating_to_numeric,
)
from kinerja.scoring.recap import (
    PerformanceRecap,
    calculate_kualitas_kerja,
    calculate_perilaku_kinerja,
    generate_all_employee_recaps,
    generate_employee_recap,
)

__all__ = [
    "categorize_organizational_level",
    "get_position_type",
    "is_eselon_level",
    "STRING_RATING_MAP",
    "get_performance_rating",
    "get_rating_label",
    "string_rating_to_numeric",
    "PerformanceRecap",
    "calculate_kualitas_kerja",
    "calculate_perilaku_kinerja",
    "generate_all_employee_recaps",
    "generate_employee_recap",
]
