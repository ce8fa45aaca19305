"""
Data integrity service.

Checks raw JSON uploads and decoded employee records, scores the damage,
and proposes recovery options.
"""

from typing import Any, Dict, List, Optional, Tuple

from kinerja.core.logging import get_logger
from kinerja.integrity import rules
from kinerja.integrity.specs import (
    IntegrityError,
    IntegrityErrorType as IE,
    IntegrityResult,
    IntegritySummary,
    IntegrityWarning,
    IntegrityWarningType as IW,
    RecommendedAction,
    RecoveryOption,
    RecoveryType,
    RiskLevel,
    Severity,
)
from kinerja.validation.service import validate_performance_data
from kinerja.validation.specs import ValidationErrorType as VE, ValidationResult

logger = get_logger("kinerja.integrity")

SEVERITY_PENALTY = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}

_VALIDATION_SEVERITY = {
    VE.CRITICAL_DATA: Severity.CRITICAL,
    VE.MISSING_EMPLOYEE: Severity.CRITICAL,
    VE.INVALID_SCORE: Severity.HIGH,
    VE.MISSING_COMPETENCY: Severity.HIGH,
    VE.DUPLICATE_EMPLOYEE: Severity.MEDIUM,
    VE.MALFORMED_HEADER: Severity.MEDIUM,
}

RECOVERY_RECOMMENDATIONS = {
    RecommendedAction.PROCEED:
        "Data quality is acceptable. You can proceed with processing.",
    RecommendedAction.REVIEW_REQUIRED:
        "Data has some issues but is mostly intact. Review warnings before proceeding.",
    RecommendedAction.MANUAL_INTERVENTION:
        "Significant data issues detected. Manual intervention recommended before proceeding.",
    RecommendedAction.ABORT:
        "Critical data integrity issues detected. Processing should be aborted until issues are resolved.",
}


# ---------------------------------------------------------------------------
# Scoring and recovery options
# ---------------------------------------------------------------------------

def calculate_integrity_score(errors: List[IntegrityError]) -> int:
    score = 100 - sum(SEVERITY_PENALTY[e.severity] for e in errors)
    return max(0, score)


def determine_recommended_action(score: int) -> RecommendedAction:
    if score >= 90:
        return RecommendedAction.PROCEED
    if score >= 70:
        return RecommendedAction.REVIEW_REQUIRED
    if score >= 40:
        return RecommendedAction.MANUAL_INTERVENTION
    return RecommendedAction.ABORT


def generate_integrity_summary(data: Any, errors: List[IntegrityError]) -> IntegritySummary:
    total = len(data) if isinstance(data, list) else 0
    corrupted = sum(1 for e in errors if e.employee_name)
    recoverable = sum(1 for e in errors if e.recoverable and e.employee_name)
    score = calculate_integrity_score(errors)
    return IntegritySummary(
        total_records=total,
        corrupted_records=corrupted,
        recoverable_records=recoverable,
        data_loss_percentage=round(corrupted / total * 100, 2) if total else 0.0,
        integrity_score=score,
        recommended_action=determine_recommended_action(score),
    )


def generate_recovery_options(errors: List[IntegrityError]) -> List[RecoveryOption]:
    options: List[RecoveryOption] = []

    auto_fixable = [
        e for e in errors
        if e.recoverable and e.type in (IE.SCHEMA_VIOLATION, IE.DATA_CORRUPTION)
    ]
    if auto_fixable:
        options.append(RecoveryOption(
            RecoveryType.AUTO_FIX,
            "Automatically fix recoverable data issues",
            "Apply default values and data normalization",
            "high", RiskLevel.SAFE,
            [e.field_name or "unknown" for e in auto_fixable],
        ))

    critical = [e for e in errors if e.severity == Severity.CRITICAL]
    if critical:
        options.append(RecoveryOption(
            RecoveryType.MANUAL_REVIEW,
            "Critical issues require manual review",
            "Review and manually correct data before proceeding",
            "high", RiskLevel.MODERATE,
            [e.field_name or "unknown" for e in critical],
        ))

    missing_fields = [e for e in errors if e.type == IE.SCHEMA_VIOLATION and e.field_name]
    if missing_fields:
        options.append(RecoveryOption(
            RecoveryType.FALLBACK_VALUES,
            "Use default values for missing fields",
            "Apply system defaults for missing required fields",
            "medium", RiskLevel.SAFE,
            [e.field_name for e in missing_fields],
        ))

    unrecoverable = [e for e in errors if not e.recoverable]
    if unrecoverable:
        options.append(RecoveryOption(
            RecoveryType.USER_INPUT_REQUIRED,
            "Some issues require user input to resolve",
            "Prompt user for missing or corrupted data",
            "low", RiskLevel.MODERATE,
            [e.field_name or "unknown" for e in unrecoverable],
        ))

    return options


def convert_validation_result(
    validation: ValidationResult,
) -> Tuple[List[IntegrityError], List[IntegrityWarning]]:
    errors = [
        IntegrityError(
            IE.SCHEMA_VIOLATION,
            e.message,
            details=e.details or "",
            severity=_VALIDATION_SEVERITY.get(e.type, Severity.LOW),
            recoverable=True,
            employee_name=e.employee_name,
            field_name=e.competency_name,
        )
        for e in validation.errors
    ]
    warnings = [
        IntegrityWarning(
            IW.DATA_INCONSISTENCY,
            w.message,
            details=w.details or "",
            employee_name=w.employee_name,
            field_name=w.competency_name,
        )
        for w in validation.warnings
    ]
    return errors, warnings


def _build_result(
    data: Any, errors: List[IntegrityError], warnings: List[IntegrityWarning]
) -> IntegrityResult:
    return IntegrityResult(
        is_valid=not errors,
        has_corruption=any(
            e.type in (IE.DATA_CORRUPTION, IE.CRITICAL_DATA_LOSS) for e in errors
        ),
        errors=errors,
        warnings=warnings,
        recovery_options=generate_recovery_options(errors),
        summary=generate_integrity_summary(data, errors),
    )


# ---------------------------------------------------------------------------
# Public checks
# ---------------------------------------------------------------------------

def validate_json_integrity(raw: Any, parsed: Optional[Any] = None) -> IntegrityResult:
    """Check raw JSON text (and optionally a value already decoded from it)."""
    errors: List[IntegrityError] = []
    warnings: List[IntegrityWarning] = []

    decoded = rules.check_raw_json(raw, parsed, errors)
    if not any(e.type == IE.JSON_PARSE_ERROR for e in errors):
        rules.check_structure(decoded, errors, warnings)

    result = _build_result(decoded, errors, warnings)
    logger.info(
        "JSON integrity: valid=%s errors=%d warnings=%d score=%d",
        result.is_valid, len(errors), len(warnings), result.summary.integrity_score,
    )
    return result


def validate_performance_data_integrity(employees: List[Dict[str, Any]]) -> IntegrityResult:
    """Record-level integrity: duplicates, encoding, then the standard validator.

    Runs the validation service, which sanitizes competency names in place.
    """
    errors: List[IntegrityError] = []
    warnings: List[IntegrityWarning] = []

    for emp in employees if isinstance(employees, list) else []:
        if isinstance(emp, dict):
            rules.check_duplicate_competencies(emp, warnings)
            rules.check_encoding(emp, warnings)

    v_errors, v_warnings = convert_validation_result(validate_performance_data(employees))
    errors.extend(v_errors)
    warnings.extend(v_warnings)

    result = _build_result(employees, errors, warnings)
    logger.info(
        "Performance data integrity: valid=%s errors=%d warnings=%d score=%d",
        result.is_valid, len(errors), len(warnings), result.summary.integrity_score,
    )
    return result


def get_integrity_message(result: IntegrityResult) -> str:
    if result.is_valid:
        return "Data integrity validation passed successfully"

    critical = sum(1 for e in result.errors if e.severity == Severity.CRITICAL)
    high = sum(1 for e in result.errors if e.severity == Severity.HIGH)
    total = len(result.errors)
    if critical:
        return f"Critical data integrity issues detected ({critical} critical, {total} total errors)"
    if high:
        return (
            f"Significant data integrity issues detected "
            f"({high} high priority, {total} total errors)"
        )
    return f"Minor data integrity issues detected ({total} errors)"


def get_recovery_recommendation(result: IntegrityResult) -> str:
    return RECOVERY_RECOMMENDATIONS.get(
        result.summary.recommended_action,
        "Unable to determine recovery recommendation.",
    )
