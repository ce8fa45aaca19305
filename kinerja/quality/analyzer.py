"""
Dataset quality analyzer.

Scores a dataset on four metrics (completeness, accuracy, consistency,
validity), folds in integrity and validation outcomes, and produces
typed recommendations.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kinerja.core.logging import get_logger
from kinerja.integrity.specs import IntegrityResult
from kinerja.quality.report import QualityLevel
from kinerja.validation.specs import ValidationResult, performance_of

logger = get_logger("kinerja.quality")

PROFILE_FIELDS = (
    "name", "nip", "gol", "pangkat", "position", "sub_position", "organizational_level",
)

PLACEHOLDERS = (
    "test", "example", "placeholder", "dummy", "sample",
    "unknown", "n/a", "tbd", "todo", "temp",
)

EXPECTED_ORG_LEVELS = 6


@dataclass
class QualityMetrics:
    completeness: float = 0.0
    accuracy: float = 0.0
    consistency: float = 0.0
    validity: float = 0.0
    overall: float = 0.0


@dataclass
class QualityIssues:
    critical: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@dataclass
class QualityRecommendation:
    type: str          # immediate | improvement | maintenance
    priority: str      # high | medium | low
    description: str
    impact: str


@dataclass
class QualityAnalysis:
    score: int
    level: QualityLevel
    metrics: QualityMetrics
    issues: QualityIssues
    recommendations: List[QualityRecommendation]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "metrics": self.metrics.__dict__.copy(),
            "issues": self.issues.__dict__.copy(),
            "recommendations": [r.__dict__.copy() for r in self.recommendations],
        }


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _records(data: Any) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return [emp for emp in data if isinstance(emp, dict)]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def calculate_completeness(data: List[Dict[str, Any]]) -> int:
    if not data:
        return 0
    total = len(data) * (len(PROFILE_FIELDS) + 1)
    completed = 0
    for emp in data:
        completed += sum(1 for f in PROFILE_FIELDS if _text(emp.get(f)))
        if performance_of(emp):
            completed += 1
    return round(completed / total * 100)


def find_accuracy_issues(data: List[Dict[str, Any]]) -> List[str]:
    issues = []
    for index, emp in enumerate(data, start=1):
        name = _text(emp.get("name"))
        if name and (len(name) < 2 or re.search(r"\d{5,}", name)):
            issues.append(f"Employee {index}: Suspicious name pattern")
        for perf in performance_of(emp):
            score = perf.get("score") if isinstance(perf, dict) else None
            if isinstance(score, (int, float)) and not isinstance(score, bool) and not 0 <= score <= 100:
                issues.append(f"Employee {index}: Invalid performance score: {score}")
    return issues


def calculate_accuracy(
    data: List[Dict[str, Any]], validation: Optional[ValidationResult] = None
) -> int:
    score = 100
    if validation is not None:
        score -= min(len(validation.errors) * 5, 50) + min(len(validation.warnings) * 2, 30)
    score -= min(len(find_accuracy_issues(data)) * 3, 20)
    return max(0, round(score))


def naming_pattern(name: str) -> str:
    words = len(name.split())
    numbers = "with-numbers" if re.search(r"\d", name) else "no-numbers"
    caps = "caps" if name == name.upper() else "mixed"
    return f"{words}-words-{numbers}-{caps}"


def nip_format(nip: Any) -> str:
    text = _text(nip) if not isinstance(nip, (int, float)) else str(nip)
    if not text:
        return "empty"
    length = len(re.sub(r"[\s-]", "", text))
    spaces = "spaces" if re.search(r"\s", text) else "no-spaces"
    dashes = "dashes" if "-" in text else "no-dashes"
    return f"{length}-digits-{spaces}-{dashes}"


def _competency_count_variance(data: List[Dict[str, Any]]) -> float:
    counts = [
        len({_text(p.get("name")) for p in performance_of(emp) if isinstance(p, dict)})
        for emp in data if performance_of(emp)
    ]
    if not counts:
        return 0.0
    mean = sum(counts) / len(counts)
    return sum((c - mean) ** 2 for c in counts) / len(counts)


def calculate_consistency(data: List[Dict[str, Any]]) -> int:
    if not data:
        return 100
    inconsistencies = 0

    org_levels = {_text(emp.get("organizational_level")) for emp in data}
    if len(org_levels) > EXPECTED_ORG_LEVELS:
        inconsistencies += min(len(org_levels) - EXPECTED_ORG_LEVELS, 5)

    patterns = {naming_pattern(_text(emp.get("name"))) for emp in data if _text(emp.get("name"))}
    inconsistencies += max(0, len(patterns) - 3)

    variance = _competency_count_variance(data)
    if variance > 10:
        inconsistencies += int(variance // 5)

    return round(max(0, 100 - inconsistencies * 5))


def is_placeholder(value: Any) -> bool:
    normalized = _text(value).lower()
    return any(p in normalized for p in PLACEHOLDERS)


def find_invalid_patterns(data: List[Dict[str, Any]]) -> List[str]:
    patterns: List[str] = []
    name_counts: Dict[str, int] = {}
    for emp in data:
        name_counts[_text(emp.get("name"))] = name_counts.get(_text(emp.get("name")), 0) + 1

    for index, emp in enumerate(data, start=1):
        name = _text(emp.get("name"))
        if is_placeholder(name):
            patterns.append(f"Employee {index}: Placeholder name detected")
        if name_counts[name] > 1:
            patterns.append(f"Duplicate employee name: {name}")
    return list(dict.fromkeys(patterns))


def calculate_validity(
    data: List[Dict[str, Any]], integrity: Optional[IntegrityResult] = None
) -> int:
    score = integrity.summary.integrity_score if integrity is not None else 100
    score -= min(len(find_invalid_patterns(data)) * 10, 40)
    return max(0, round(score))


def determine_quality_level(score: float) -> QualityLevel:
    if score >= 90:
        return QualityLevel.EXCELLENT
    if score >= 70:
        return QualityLevel.GOOD
    if score >= 50:
        return QualityLevel.FAIR
    return QualityLevel.POOR


# ---------------------------------------------------------------------------
# Issues and recommendations
# ---------------------------------------------------------------------------

def identify_issues(
    data: List[Dict[str, Any]],
    integrity: Optional[IntegrityResult] = None,
    validation: Optional[ValidationResult] = None,
) -> QualityIssues:
    issues = QualityIssues()

    if not data:
        issues.critical.append("No employee data found")
    if integrity is not None and not integrity.is_valid:
        issues.critical.append("Data integrity validation failed")
    if validation is not None:
        issues.critical.extend(f"Validation error: {e.message}" for e in validation.errors)
        issues.warnings.extend(f"Validation warning: {w.message}" for w in validation.warnings)

    missing_names = sum(1 for emp in data if not _text(emp.get("name")))
    if missing_names:
        issues.warnings.append(f"{missing_names} employees missing names")
    missing_perf = sum(1 for emp in data if not performance_of(emp))
    if missing_perf:
        issues.warnings.append(f"{missing_perf} employees missing performance data")

    if data:
        if len({nip_format(emp.get("nip")) for emp in data}) > 2:
            issues.suggestions.append("Consider standardizing NIP formats across all employees")
        unknown = sum(1 for emp in data if not emp.get("organizational_level"))
        if unknown > len(data) * 0.3:
            issues.suggestions.append(
                "Consider assigning organizational levels to employees with unknown levels"
            )

    return issues


def generate_recommendations(
    metrics: QualityMetrics, issues: QualityIssues, level: QualityLevel
) -> List[QualityRecommendation]:
    recs: List[QualityRecommendation] = []
    if issues.critical:
        recs.append(QualityRecommendation(
            "immediate", "high",
            "Address critical data integrity issues before proceeding",
            "Essential for data reliability and system stability",
        ))
    if metrics.completeness < 80:
        recs.append(QualityRecommendation(
            "improvement", "high",
            "Improve data completeness by filling missing required fields",
            "Better reporting accuracy and analysis capabilities",
        ))
    if metrics.accuracy < 70:
        recs.append(QualityRecommendation(
            "improvement", "high",
            "Review and correct data accuracy issues",
            "Improved decision-making based on reliable data",
        ))
    if metrics.consistency < 70:
        recs.append(QualityRecommendation(
            "improvement", "medium",
            "Standardize data formats and naming conventions",
            "Better data integration and automated processing",
        ))
    if level in (QualityLevel.GOOD, QualityLevel.EXCELLENT):
        recs.append(QualityRecommendation(
            "maintenance", "low",
            "Implement regular data quality monitoring",
            "Maintain current quality levels and prevent degradation",
        ))
    return recs


def analyze_data_quality(
    data: Any,
    integrity_result: Optional[IntegrityResult] = None,
    validation_result: Optional[ValidationResult] = None,
) -> QualityAnalysis:
    records = _records(data)

    metrics = QualityMetrics(
        completeness=calculate_completeness(records),
        accuracy=calculate_accuracy(records, validation_result),
        consistency=calculate_consistency(records),
        validity=calculate_validity(records, integrity_result),
    )
    metrics.overall = (
        metrics.completeness + metrics.accuracy + metrics.consistency + metrics.validity
    ) / 4

    score = metrics.overall
    if integrity_result is not None and not integrity_result.is_valid:
        score *= 0.8
    if validation_result is not None and validation_result.errors:
        score *= 0.9
    score = round(score)

    level = determine_quality_level(score)
    issues = identify_issues(records, integrity_result, validation_result)
    logger.debug("Quality analysis metrics: %s", metrics)

    return QualityAnalysis(
        score=score,
        level=level,
        metrics=metrics,
        issues=issues,
        recommendations=generate_recommendations(metrics, issues, level),
    )
