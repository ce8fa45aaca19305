"""
Integrity data models: error/warning kinds, recovery options and the
integrity summary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class IntegrityErrorType(str, Enum):
    JSON_PARSE_ERROR = "json_parse_error"
    DATA_CORRUPTION = "data_corruption"
    SCHEMA_VIOLATION = "schema_violation"
    CRITICAL_DATA_LOSS = "critical_data_loss"
    ENCODING_ERROR = "encoding_error"


class IntegrityWarningType(str, Enum):
    PARTIAL_CORRUPTION = "partial_corruption"
    DATA_INCONSISTENCY = "data_inconsistency"
    FORMAT_ANOMALY = "format_anomaly"
    ENCODING_ISSUE = "encoding_issue"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecoveryType(str, Enum):
    AUTO_FIX = "auto_fix"
    MANUAL_REVIEW = "manual_review"
    DATA_RESTORATION = "data_restoration"
    FALLBACK_VALUES = "fallback_values"
    USER_INPUT_REQUIRED = "user_input_required"


class RiskLevel(str, Enum):
    SAFE = "safe"
    MODERATE = "moderate"
    RISKY = "risky"


class RecommendedAction(str, Enum):
    PROCEED = "proceed"
    REVIEW_REQUIRED = "review_required"
    MANUAL_INTERVENTION = "manual_intervention"
    ABORT = "abort"


def _enum_dict(obj: Any) -> Dict[str, Any]:
    d = {}
    for key, value in obj.__dict__.items():
        if value is None:
            continue
        d[key] = value.value if isinstance(value, Enum) else value
    return d


@dataclass
class IntegrityError:
    type: IntegrityErrorType
    message: str
    details: str = ""
    severity: Severity = Severity.MEDIUM
    recoverable: bool = False
    employee_name: Optional[str] = None
    field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _enum_dict(self)


@dataclass
class IntegrityWarning:
    type: IntegrityWarningType
    message: str
    details: str = ""
    employee_name: Optional[str] = None
    field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _enum_dict(self)


@dataclass
class RecoveryOption:
    type: RecoveryType
    description: str
    action: str
    confidence: str                    # high | medium | low
    risk_level: RiskLevel
    affected_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _enum_dict(self)


@dataclass
class IntegritySummary:
    total_records: int = 0
    corrupted_records: int = 0
    recoverable_records: int = 0
    data_loss_percentage: float = 0.0
    integrity_score: int = 100
    recommended_action: RecommendedAction = RecommendedAction.PROCEED

    def to_dict(self) -> Dict[str, Any]:
        return _enum_dict(self)


@dataclass
class IntegrityResult:
    is_valid: bool
    has_corruption: bool
    errors: List[IntegrityError] = field(default_factory=list)
    warnings: List[IntegrityWarning] = field(default_factory=list)
    recovery_options: List[RecoveryOption] = field(default_factory=list)
    summary: IntegritySummary = field(default_factory=IntegritySummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "has_corruption": self.has_corruption,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "recovery_options": [o.to_dict() for o in self.recovery_options],
            "summary": self.summary.to_dict(),
        }
