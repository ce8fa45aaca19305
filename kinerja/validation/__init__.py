"""
Performance data validation.

Usage:
    from kinerja.validation import validate_performance_data
    result = validate_performance_data(employees)
"""

from kinerja.validation.service import (
    PerformanceDataValidator,
    get_validation_message,
    get_validation_severity,
    validate_performance_data,
)
from kinerja.validation.specs import (
    REQUIRED_COMPETENCIES,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    ValidationSummary,
    ValidationWarning,
    ValidationWarningType,
)

__all__ = [
    "PerformanceDataValidator",
    "get_validation_message",
    "get_validation_severity",
    "validate_performance_data",
    "REQUIRED_COMPETENCIES",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "ValidationSummary",
    "ValidationWarning",
    "ValidationWarningType",
]
