"""
Data quality report.

Per-employee completeness against the required competencies, scoring
reliability, and dataset-level recommendations.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from kinerja.core.logging import get_logger
from kinerja.validation.competencies import find_matching_competency
from kinerja.validation.service import validate_performance_data
from kinerja.validation.specs import (
    KUALITAS_KERJA,
    PERILAKU_KINERJA,
    REQUIRED_COMPETENCIES,
    ValidationResult,
    ValidationWarningType,
    performance_of,
)

logger = get_logger("kinerja.quality")


class QualityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ScoringReliability(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class EmployeeDataQuality:
    name: str
    completeness: float
    missing_competencies: List[str]
    scoring_reliability: ScoringReliability
    can_calculate_recap: bool

    def to_dict(self) -> Dict[str, Any]:
        d = self.__dict__.copy()
        d["scoring_reliability"] = self.scoring_reliability.value
        return d


@dataclass
class ScoringImpact:
    affected_employees: int = 0
    unreliable_recaps: int = 0
    missing_critical_data: List[str] = field(default_factory=list)


@dataclass
class DataQualityReport:
    overall_quality: QualityLevel
    completeness: float
    employee_quality: List[EmployeeDataQuality]
    recommendations: List[str]
    scoring_impact: ScoringImpact

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_quality": self.overall_quality.value,
            "completeness": self.completeness,
            "employee_quality": [eq.to_dict() for eq in self.employee_quality],
            "recommendations": list(self.recommendations),
            "scoring_impact": self.scoring_impact.__dict__.copy(),
        }


QUALITY_BADGES: Dict[QualityLevel, Dict[str, str]] = {
    QualityLevel.EXCELLENT: {
        "label": "Excellent",
        "color": "green",
        "description": "All data complete, calculations fully reliable",
    },
    QualityLevel.GOOD: {
        "label": "Good",
        "color": "blue",
        "description": "Minor data gaps, calculations mostly reliable",
    },
    QualityLevel.FAIR: {
        "label": "Fair",
        "color": "yellow",
        "description": "Some data missing, calculations may be affected",
    },
    QualityLevel.POOR: {
        "label": "Poor",
        "color": "red",
        "description": "Significant data gaps, calculations unreliable",
    },
}


def analyze_employee_quality(employee: Dict[str, Any]) -> EmployeeDataQuality:
    name = str(employee.get("name") or "") if isinstance(employee, dict) else ""
    performance = performance_of(employee)
    if not performance:
        return EmployeeDataQuality(
            name=name,
            completeness=0.0,
            missing_competencies=[req.name for req in REQUIRED_COMPETENCIES],
            scoring_reliability=ScoringReliability.LOW,
            can_calculate_recap=False,
        )

    comp_names = [
        p["name"] for p in performance if isinstance(p, dict) and isinstance(p.get("name"), str)
    ]
    missing = [
        req for req in REQUIRED_COMPETENCIES
        if not any(find_matching_competency(n, [req]) for n in comp_names)
    ]
    found = len(REQUIRED_COMPETENCIES) - len(missing)
    completeness = round(found / len(REQUIRED_COMPETENCIES) * 100, 2)

    missing_perilaku = sum(1 for req in missing if req.category == PERILAKU_KINERJA)
    missing_kualitas = sum(1 for req in missing if req.category == KUALITAS_KERJA)

    can_recap = True
    if not missing:
        reliability = ScoringReliability.HIGH
    elif len(missing) <= 2 and missing_perilaku <= 1 and missing_kualitas <= 1:
        reliability = ScoringReliability.MEDIUM
    else:
        reliability = ScoringReliability.LOW
        if missing_perilaku >= 3 or missing_kualitas >= 2:
            can_recap = False

    return EmployeeDataQuality(
        name=name,
        completeness=completeness,
        missing_competencies=[req.name for req in missing],
        scoring_reliability=reliability,
        can_calculate_recap=can_recap,
    )


def _recommendations(
    validation: ValidationResult, employee_quality: List[EmployeeDataQuality]
) -> List[str]:
    recs: List[str] = []

    if validation.errors:
        recs.append("Fix critical data errors before proceeding with performance calculations")

    if validation.summary.missing_competencies:
        recs.append(
            "Import complete performance data including: "
            + ", ".join(validation.summary.missing_competencies)
        )

    low = sum(1 for eq in employee_quality if eq.completeness < 70)
    if low:
        recs.append(f"{low} employees have incomplete performance data (< 70% complete)")

    unreliable = sum(1 for eq in employee_quality if not eq.can_calculate_recap)
    if unreliable:
        recs.append(f"{unreliable} employees cannot have reliable performance recaps calculated")

    if validation.warnings_of(ValidationWarningType.ORG_LEVEL_DEFAULT):
        recs.append(
            "Import employee roster data to get accurate organizational levels for better scoring"
        )

    if validation.summary.data_completeness < 90:
        recs.append("Consider collecting additional performance data to improve calculation accuracy")

    if not recs:
        recs.append("Data quality is excellent! All performance calculations will be reliable")
    return recs


def generate_data_quality_report(employees: List[Dict[str, Any]]) -> DataQualityReport:
    """Build the quality report. The caller's records are left untouched."""
    records = employees if isinstance(employees, list) else []
    validation = validate_performance_data(copy.deepcopy(records))
    employee_quality = [analyze_employee_quality(emp) for emp in records]

    avg = (
        sum(eq.completeness for eq in employee_quality) / len(employee_quality)
        if employee_quality else 0.0
    )
    affected = sum(1 for eq in employee_quality if eq.scoring_reliability != ScoringReliability.HIGH)
    unreliable = sum(1 for eq in employee_quality if not eq.can_calculate_recap)

    if avg >= 95 and not validation.errors:
        overall = QualityLevel.EXCELLENT
    elif avg >= 85 and unreliable == 0:
        overall = QualityLevel.GOOD
    elif avg >= 70 and unreliable <= len(records) * 0.2:
        overall = QualityLevel.FAIR
    else:
        overall = QualityLevel.POOR

    report = DataQualityReport(
        overall_quality=overall,
        completeness=round(avg, 2),
        employee_quality=employee_quality,
        recommendations=_recommendations(validation, employee_quality),
        scoring_impact=ScoringImpact(
            affected_employees=affected,
            unreliable_recaps=unreliable,
            missing_critical_data=list(validation.summary.missing_competencies),
        ),
    )
    logger.info("Quality report: %s (%.2f%% complete)", overall.value, report.completeness)
    return report


def get_data_quality_badge(quality: str) -> Dict[str, str]:
    try:
        level = QualityLevel(quality)
    except ValueError:
        level = QualityLevel.POOR
    return dict(QUALITY_BADGES[level])


def can_calculate_reliable_recap(employee: Dict[str, Any]) -> bool:
    return analyze_employee_quality(employee).can_calculate_recap


def get_calculation_warning(employee: Dict[str, Any]) -> Optional[str]:
    quality = analyze_employee_quality(employee)
    if not quality.can_calculate_recap:
        return (
            "Performance recap may be unreliable due to missing critical competencies: "
            + ", ".join(quality.missing_competencies)
        )
    if quality.scoring_reliability == ScoringReliability.LOW:
        return "Performance scoring has reduced reliability due to missing data"
    if quality.scoring_reliability == ScoringReliability.MEDIUM:
        return "Performance scoring is mostly reliable with minor data gaps"
    return None
