"""Rating labels and string-to-score conversion for performance reviews."""

from typing import Any, Optional

STRING_RATING_MAP = {
    "Kurang Baik": 65,
    "Baik": 75,
    "Sangat Baik": 85,
}

RATING_THRESHOLDS = {
    "excellent": 85,
    "good": 75,
    "fair": 65,
    "poor": 50,
}


def is_valid_string_rating(value: Any) -> bool:
    return isinstance(value, str) and value in STRING_RATING_MAP


def string_rating_to_numeric(rating: Any) -> Optional[int]:
    """"Baik" -> 75. Unknown ratings return None."""
    if not isinstance(rating, str):
        return None
    return STRING_RATING_MAP.get(rating.strip())


def get_rating_label(score: float) -> str:
    if score >= RATING_THRESHOLDS["excellent"]:
        return "Sangat Baik"
    if score >= RATING_THRESHOLDS["good"]:
        return "Baik"
    if score >= RATING_THRESHOLDS["fair"]:
        return "Cukup"
    return "Kurang Baik"


def get_performance_rating(total_score: float) -> str:
    """Rating for a recap total, which is capped at 85."""
    if total_score >= 80:
        return "Sangat Baik"
    if total_score >= 70:
        return "Baik"
    return "Kurang Baik"
