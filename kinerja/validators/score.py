"""
Score validation: per-entry structure and range checks plus
per-competency consistency statistics (identical scores, low variance,
outliers).
"""

import math
import re
import statistics
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from kinerja.validation.specs import (
    ValidationError,
    ValidationErrorType as E,
    ValidationWarning,
    ValidationWarningType as W,
)

Issues = Tuple[List[ValidationError], List[ValidationWarning]]

MIN_SCORE = 0
MAX_SCORE = 100
LOW_VARIANCE_STDDEV = 5
LOW_VARIANCE_MIN_SAMPLES = 10
OUTLIER_SIGMA = 2


@dataclass
class ScoreCheck:
    is_valid: bool
    normalized_score: Optional[float] = None
    error: Optional[str] = None


class ScoreValidator:
    def validate_performance_scores(self, employees: List[Dict[str, Any]]) -> Issues:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []

        for emp in employees:
            if not isinstance(emp, dict):
                continue
            name = emp.get("name")
            performance = emp.get("performance")
            if not isinstance(performance, list):
                warnings.append(ValidationWarning(
                    W.PARTIAL_DATA,
                    "Employee has no performance data",
                    employee_name=name,
                ))
                continue

            for index, perf in enumerate(performance):
                if not isinstance(perf, dict):
                    errors.append(ValidationError(
                        E.INVALID_SCORE,
                        f"Performance entry at index {index} is not an object",
                        employee_name=name,
                    ))
                    continue
                if not perf.get("name"):
                    errors.append(ValidationError(
                        E.MISSING_COMPETENCY,
                        f"Performance entry at index {index} has no competency name",
                        employee_name=name,
                    ))
                    continue
                if perf.get("score") is None:
                    errors.append(ValidationError(
                        E.INVALID_SCORE,
                        "Missing score",
                        employee_name=name,
                        competency_name=perf["name"],
                    ))
                    continue

                check = self.validate_single_score(perf["score"])
                if check.is_valid:
                    continue
                errors.append(ValidationError(
                    E.INVALID_SCORE,
                    check.error or "Invalid score",
                    details=f"Score value: {perf['score']!r}",
                    employee_name=name,
                    competency_name=perf["name"],
                ))
                if check.normalized_score is not None:
                    warnings.append(ValidationWarning(
                        W.SCORE_NORMALIZATION,
                        check.error or "Score normalized",
                        details=f"{perf['score']} -> {check.normalized_score}",
                        employee_name=name,
                        competency_name=perf["name"],
                    ))

        return errors, warnings

    @staticmethod
    def validate_single_score(score: Any) -> ScoreCheck:
        """Check one score; out-of-range numbers come back clamped."""
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return ScoreCheck(False, None, "Score must be a number")
        if math.isnan(score) or math.isinf(score):
            return ScoreCheck(False, None, "Score must be a finite number")
        if score < MIN_SCORE:
            return ScoreCheck(False, MIN_SCORE, "Negative score (will be set to 0)")
        if score > MAX_SCORE:
            return ScoreCheck(False, MAX_SCORE, "Score above 100 (will be capped)")
        return ScoreCheck(True, score)

    def validate_score_consistency(self, employees: List[Dict[str, Any]]) -> Issues:
        warnings: List[ValidationWarning] = []
        by_competency: Dict[str, List[float]] = {}

        for emp in employees:
            if not isinstance(emp, dict) or not isinstance(emp.get("performance"), list):
                continue
            for perf in emp["performance"]:
                if not isinstance(perf, dict) or not isinstance(perf.get("name"), str):
                    continue
                check = self.validate_single_score(perf.get("score"))
                if check.is_valid:
                    key = re.sub(r"\s+", " ", perf["name"].lower()).strip()
                    by_competency.setdefault(key, []).append(float(check.normalized_score))

        for competency, scores in by_competency.items():
            if len(scores) < 2:
                continue

            if len(set(scores)) == 1:
                warnings.append(ValidationWarning(
                    W.QUALITY_CONCERN,
                    "All employees have identical scores",
                    details=f"Every score is {scores[0]:g}",
                    competency_name=competency,
                    affected_count=len(scores),
                ))
                continue

            mean = statistics.fmean(scores)
            stddev = statistics.pstdev(scores)
            if len(scores) > LOW_VARIANCE_MIN_SAMPLES and stddev < LOW_VARIANCE_STDDEV:
                warnings.append(ValidationWarning(
                    W.QUALITY_CONCERN,
                    "Scores show unusually low variance",
                    details=f"Standard deviation {stddev:.2f} across {len(scores)} scores",
                    competency_name=competency,
                    affected_count=len(scores),
                ))

            outliers = [s for s in scores if abs(s - mean) > OUTLIER_SIGMA * stddev]
            if outliers:
                warnings.append(ValidationWarning(
                    W.QUALITY_CONCERN,
                    "Score outliers detected",
                    details=(
                        f"{len(outliers)} scores more than {OUTLIER_SIGMA} standard "
                        f"deviations from mean {mean:.2f}"
                    ),
                    competency_name=competency,
                    affected_count=len(outliers),
                ))

        return [], warnings
