"""
Data integrity checks for uploaded performance data.
"""

from kinerja.integrity.service import (
    get_integrity_message,
    get_recovery_recommendation,
    validate_json_integrity,
    validate_performance_data_integrity,
)
from kinerja.integrity.specs import (
    IntegrityError,
    IntegrityErrorType,
    IntegrityResult,
    IntegrityWarning,
    IntegrityWarningType,
    RecommendedAction,
    RecoveryOption,
    RecoveryType,
    Severity,
)

__all__ = [
    "get_integrity_message",
    "get_recovery_recommendation",
    "validate_json_integrity",
    "validate_performance_data_integrity",
    "IntegrityError",
    "IntegrityErrorType",
    "IntegrityResult",
    "IntegrityWarning",
    "IntegrityWarningType",
    "RecommendedAction",
    "RecoveryOption",
    "RecoveryType",
    "Severity",
]
