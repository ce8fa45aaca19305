"""
Validation data models.

Issue types, result containers, required competencies and limits shared
by the validation service, the composable validators, quality reports and
the integrity layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from kinerja.core.config import get_config_value


class ValidationErrorType(str, Enum):
    MISSING_EMPLOYEE = "missing_employee"
    INVALID_SCORE = "invalid_score"
    MISSING_COMPETENCY = "missing_competency"
    MALFORMED_HEADER = "malformed_header"
    DUPLICATE_EMPLOYEE = "duplicate_employee"
    CRITICAL_DATA = "critical_data"
    CIRCULAR_REFERENCE = "circular_reference"
    ARRAY_SIZE_EXCEEDED = "array_size_exceeded"
    INVALID_COMPETENCY_NAME = "invalid_competency_name"
    DUPLICATE_COMPETENCY = "duplicate_competency"


class ValidationWarningType(str, Enum):
    PARTIAL_DATA = "partial_data"
    SCORE_NORMALIZATION = "score_normalization"
    ORG_LEVEL_DEFAULT = "org_level_default"
    COMPETENCY_MISMATCH = "competency_mismatch"
    QUALITY_CONCERN = "quality_concern"
    COMPETENCY_MERGED = "competency_merged"
    COMPETENCY_SANITIZED = "competency_sanitized"


class ScoreQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ValidationSeverity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ValidationIssue:
    """A single finding. ``type`` is a ValidationErrorType or ValidationWarningType."""

    type: Enum
    message: str
    details: Optional[str] = None
    employee_name: Optional[str] = None
    competency_name: Optional[str] = None
    affected_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {k: v for k, v in self.__dict__.items() if v is not None}
        d["type"] = self.type.value
        return d


@dataclass
class ValidationError(ValidationIssue):
    type: ValidationErrorType


@dataclass
class ValidationWarning(ValidationIssue):
    type: ValidationWarningType


@dataclass
class ValidationSummary:
    total_employees: int = 0
    valid_employees: int = 0
    invalid_employees: int = 0
    total_competencies: int = 0
    required_competencies: List[str] = field(default_factory=list)
    missing_competencies: List[str] = field(default_factory=list)
    data_completeness: float = 0.0
    score_quality: ScoreQuality = ScoreQuality.POOR

    # Filled in by the validator orchestrator
    error_count: Optional[int] = None
    warning_count: Optional[int] = None
    validation_timestamp: Optional[str] = None
    overall_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {k: v for k, v in self.__dict__.items() if v is not None}
        d["score_quality"] = self.score_quality.value
        return d


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    def errors_of(self, *types: ValidationErrorType) -> List[ValidationError]:
        return [e for e in self.errors if e.type in types]

    def warnings_of(self, *types: ValidationWarningType) -> List[ValidationWarning]:
        return [w for w in self.warnings if w.type in types]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class CompetencyRequirement:
    name: str
    aliases: tuple
    category: str                      # perilaku_kinerja | kualitas_kerja
    weight: float


PERILAKU_KINERJA = "perilaku_kinerja"
KUALITAS_KERJA = "kualitas_kerja"

REQUIRED_COMPETENCIES: List[CompetencyRequirement] = [
    CompetencyRequirement(
        "inisiatif dan fleksibilitas",
        ("inisiatif", "fleksibilitas", "initiative", "flexibility"),
        PERILAKU_KINERJA, 5,
    ),
    CompetencyRequirement(
        "kehadiran dan ketepatan waktu",
        ("kehadiran", "ketepatan", "waktu", "attendance", "punctuality"),
        PERILAKU_KINERJA, 5,
    ),
    CompetencyRequirement(
        "kerjasama dan team work",
        ("kerjasama", "team", "teamwork", "cooperation", "collaboration"),
        PERILAKU_KINERJA, 5,
    ),
    CompetencyRequirement(
        "manajemen waktu kerja",
        ("manajemen", "waktu", "kerja", "time management", "work management"),
        PERILAKU_KINERJA, 5,
    ),
    CompetencyRequirement(
        "kepemimpinan",
        ("kepemimpinan", "leadership", "pemimpin"),
        PERILAKU_KINERJA, 10,
    ),
    CompetencyRequirement(
        "kualitas kinerja",
        ("kualitas", "kinerja", "quality", "performance", "work quality"),
        KUALITAS_KERJA, 25.5,
    ),
    CompetencyRequirement(
        "kemampuan berkomunikasi",
        ("komunikasi", "berkomunikasi", "communication", "komunikatif"),
        KUALITAS_KERJA, 8.5,
    ),
    CompetencyRequirement(
        "pemahaman tentang permasalahan sosial",
        ("permasalahan", "sosial", "social", "pemahaman sosial", "social understanding"),
        KUALITAS_KERJA, 8.5,
    ),
]


@dataclass
class ValidationLimits:
    max_array_size: int = 1000
    max_competency_count: int = 50
    max_circular_reference_depth: int = 10
    min_competency_name_length: int = 2
    max_competency_name_length: int = 100
    max_employees: int = 10000

    @classmethod
    def from_config(cls) -> "ValidationLimits":
        """Build limits from config.yaml ``validation.limits``, falling back to defaults."""
        configured = get_config_value("validation", "limits", default={}) or {}
        known = {k: int(v) for k, v in configured.items() if k in cls.__dataclass_fields__}
        return cls(**known)


STAFF_OTHER = "Staff/Other"


def employee_name(employee: Any) -> str:
    """Display name for a record, tolerating non-dict input."""
    if isinstance(employee, dict):
        return str(employee.get("name") or "")
    return ""


def performance_of(employee: Any) -> list:
    """The performance list of a record, or an empty list."""
    if isinstance(employee, dict) and isinstance(employee.get("performance"), list):
        return employee["performance"]
    return []
