"""
Integrity-aware data service.

Combines integrity checks, recovery strategies, cleaning, auto-fixes and
validation into single operations that always return a
DataOperationResult instead of raising on bad data.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kinerja.core.logging import get_logger
from kinerja.integrity.service import (
    validate_json_integrity,
    validate_performance_data_integrity,
)
from kinerja.integrity.specs import IntegrityResult, RecoveryOption
from kinerja.recovery.fixes import (
    OperationMetadata,
    RecoveryAdvice,
    analyze_recovery_options,
    apply_auto_fixes,
    apply_default_values,
    calculate_quality_score,
    generate_error_report,
    get_quality_level,
)
from kinerja.recovery.strategies import (
    RecoveryOptions,
    clean_and_normalize_data,
    recover_data,
)
from kinerja.validation.service import validate_performance_data
from kinerja.validation.specs import ValidationResult

logger = get_logger("kinerja.recovery")


@dataclass
class DataOperationResult:
    success: bool
    metadata: OperationMetadata
    data: Optional[List[Dict[str, Any]]] = None
    integrity_result: Optional[IntegrityResult] = None
    validation_result: Optional[ValidationResult] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recovery_options: List[RecoveryOption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "recovery_options": [o.to_dict() for o in self.recovery_options],
            "metadata": self.metadata.__dict__.copy(),
            "record_count": len(self.data) if self.data is not None else 0,
            "integrity": self.integrity_result.summary.to_dict() if self.integrity_result else None,
            "validation": self.validation_result.summary.to_dict() if self.validation_result else None,
        }


class EnhancedDataService:
    """Parse and re-check employee data with recovery and auto-fixing."""

    def __init__(self, default_options: Optional[RecoveryOptions] = None):
        self.default_options = default_options or RecoveryOptions.from_config()

    def _options(self, options: Optional[RecoveryOptions]) -> RecoveryOptions:
        return options or self.default_options

    def parse_performance_data_with_integrity(
        self, raw_json: str, options: Optional[RecoveryOptions] = None
    ) -> DataOperationResult:
        options = self._options(options)
        metadata = OperationMetadata(operation="parse_performance_data_with_integrity")
        errors: List[str] = []
        warnings: List[str] = []

        try:
            integrity = validate_json_integrity(raw_json)
            records: Optional[List[Any]] = None

            if not integrity.is_valid:
                if options.auto_fix and integrity.recovery_options:
                    attempt = recover_data(raw_json, options.max_recovery_attempts)
                    if attempt.success:
                        records = attempt.data
                        metadata.records_recovered = attempt.records_recovered
                        warnings.append(
                            f"Data recovery successful: {attempt.records_recovered} records recovered"
                        )
                    else:
                        errors.append(f"Data recovery failed: {attempt.error}")
                else:
                    errors.append("JSON integrity validation failed and recovery is disabled")
            else:
                parsed = json.loads(raw_json)
                records = parsed if isinstance(parsed, list) else [parsed]

            validation = None
            if records is not None:
                metadata.records_processed = len(records)
                records, validation = self._clean_and_check(records, options, metadata, warnings)

            metadata.data_quality_score = calculate_quality_score(integrity, validation)
            logger.info(
                "Parsed %d records (%d recovered), quality %d",
                metadata.records_processed, metadata.records_recovered,
                metadata.data_quality_score,
            )
            return DataOperationResult(
                success=not errors,
                metadata=metadata,
                data=records,
                integrity_result=integrity,
                validation_result=validation,
                errors=errors,
                warnings=warnings,
                recovery_options=list(integrity.recovery_options),
            )
        except Exception as exc:
            logger.exception("Unexpected error while parsing performance data")
            errors.append(f"Unexpected error during data processing: {exc}")
            metadata.data_quality_score = 0
            return DataOperationResult(
                success=False, metadata=metadata, errors=errors, warnings=warnings
            )

    def _clean_and_check(
        self,
        records: List[Any],
        options: RecoveryOptions,
        metadata: OperationMetadata,
        warnings: List[str],
    ):
        cleaned = clean_and_normalize_data(records, options)
        record_integrity = validate_performance_data_integrity(cleaned)
        if not record_integrity.is_valid and options.auto_fix:
            cleaned, fixed = apply_auto_fixes(cleaned)
            metadata.records_recovered += fixed
            warnings.append(f"Auto-fixed {fixed} data issues")
        return cleaned, validate_performance_data(cleaned)

    def get_employee_data_with_integrity(
        self, employees: List[Dict[str, Any]], options: Optional[RecoveryOptions] = None
    ) -> DataOperationResult:
        options = self._options(options)
        metadata = OperationMetadata(
            operation="get_employee_data_with_integrity",
            records_processed=len(employees),
        )
        errors: List[str] = []
        warnings: List[str] = []
        data = employees

        try:
            integrity = validate_performance_data_integrity(employees)
            if not integrity.is_valid:
                if options.auto_fix:
                    data, fixed = apply_auto_fixes(data)
                    metadata.records_recovered = fixed
                    warnings.append(f"Auto-fixed {fixed} data integrity issues")
                else:
                    errors.append("Data integrity issues detected and auto-fix is disabled")

            if options.use_default_values:
                data, modified = apply_default_values(data)
                if modified:
                    warnings.append(f"Applied default values to {modified} records")

            metadata.data_quality_score = calculate_quality_score(integrity, None)
            return DataOperationResult(
                success=not errors,
                metadata=metadata,
                data=data,
                integrity_result=integrity,
                errors=errors,
                warnings=warnings,
                recovery_options=list(integrity.recovery_options),
            )
        except Exception as exc:
            logger.exception("Unexpected error while checking employee data")
            errors.append(f"Error during data retrieval: {exc}")
            return DataOperationResult(
                success=False, metadata=metadata, data=employees, errors=errors, warnings=warnings
            )

    @staticmethod
    def generate_error_report(result: DataOperationResult) -> str:
        return generate_error_report(
            result.metadata, result.errors, result.warnings, result.recovery_options
        )

    @staticmethod
    def get_recovery_options_for_user(result: DataOperationResult) -> RecoveryAdvice:
        return analyze_recovery_options(
            result.success, result.metadata.data_quality_score, result.recovery_options
        )

    @staticmethod
    def get_data_quality_level(score: float) -> str:
        return get_quality_level(score)


def parse_performance_data_with_integrity(
    raw_json: str, options: Optional[RecoveryOptions] = None
) -> DataOperationResult:
    return EnhancedDataService().parse_performance_data_with_integrity(raw_json, options)


def get_employee_data_with_integrity(
    employees: List[Dict[str, Any]], options: Optional[RecoveryOptions] = None
) -> DataOperationResult:
    return EnhancedDataService().get_employee_data_with_integrity(employees, options)
