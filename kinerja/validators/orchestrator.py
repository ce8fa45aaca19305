"""
Validator orchestrator.

Runs the employee, score and competency validators and assembles a
single ValidationResult with an extended summary.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from kinerja.core.logging import get_logger
from kinerja.validation.service import build_summary
from kinerja.validation.specs import (
    ValidationError,
    ValidationLimits,
    ValidationResult,
    ValidationWarning,
)
from kinerja.validators.competency import CompetencyValidator
from kinerja.validators.employee import EmployeeValidator
from kinerja.validators.score import ScoreValidator

logger = get_logger("kinerja.validators")


@dataclass
class ValidationOptions:
    validate_employees: bool = True
    validate_scores: bool = True
    validate_competencies: bool = True


class ValidatorOrchestrator:
    def __init__(self, limits: Optional[ValidationLimits] = None):
        limits = limits or ValidationLimits.from_config()
        self.employee_validator = EmployeeValidator(limits)
        self.score_validator = ScoreValidator()
        self.competency_validator = CompetencyValidator(limits)

    def validate_all(self, employees: Any) -> ValidationResult:
        return self.validate_selective(employees, ValidationOptions())

    def validate_employee_data(self, employees: Any) -> ValidationResult:
        return self.validate_all(employees)

    def validate_selective(self, employees: Any, options: ValidationOptions) -> ValidationResult:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []

        def collect(issues):
            errors.extend(issues[0])
            warnings.extend(issues[1])

        if options.validate_employees:
            collect(self.employee_validator.validate_employee_structure(employees))

        # Record-level validators need a list to walk
        if isinstance(employees, list):
            if options.validate_scores:
                collect(self.score_validator.validate_performance_scores(employees))
                collect(self.score_validator.validate_score_consistency(employees))
            if options.validate_competencies:
                collect(self.competency_validator.validate_competencies(employees))

        return self._build_result(employees, errors, warnings)

    def validate_employees_only(self, employees: Any) -> ValidationResult:
        return self.validate_selective(
            employees, ValidationOptions(True, False, False)
        )

    def validate_scores_only(self, employees: Any) -> ValidationResult:
        return self.validate_selective(
            employees, ValidationOptions(False, True, False)
        )

    def validate_competencies_only(self, employees: Any) -> ValidationResult:
        return self.validate_selective(
            employees, ValidationOptions(False, False, True)
        )

    def get_validators(self) -> Dict[str, Any]:
        return {
            "employee": self.employee_validator,
            "score": self.score_validator,
            "competency": self.competency_validator,
        }

    def _build_result(
        self,
        employees: Any,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
    ) -> ValidationResult:
        summary = build_summary(employees, errors)
        summary.error_count = len(errors)
        summary.warning_count = len(warnings)
        summary.validation_timestamp = datetime.now(timezone.utc).isoformat()
        summary.overall_score = summary.data_completeness

        logger.info(
            "Validator run: %d errors, %d warnings over %d employees",
            len(errors), len(warnings), summary.total_employees,
        )
        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            summary=summary,
        )


_default_orchestrator: Optional[ValidatorOrchestrator] = None


def _get_default() -> ValidatorOrchestrator:
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = ValidatorOrchestrator()
    return _default_orchestrator


def create_validator_orchestrator(limits: Optional[ValidationLimits] = None) -> ValidatorOrchestrator:
    return ValidatorOrchestrator(limits)


def validate_employee_data(employees: Any) -> ValidationResult:
    return _get_default().validate_employee_data(employees)


def validate_all(employees: Any) -> ValidationResult:
    return _get_default().validate_all(employees)


def validate_selective(employees: Any, options: ValidationOptions) -> ValidationResult:
    return _get_default().validate_selective(employees, options)


def validate_employees_only(employees: Any) -> ValidationResult:
    return _get_default().validate_employees_only(employees)


def validate_scores_only(employees: Any) -> ValidationResult:
    return _get_default().validate_scores_only(employees)


def validate_competencies_only(employees: Any) -> ValidationResult:
    return _get_default().validate_competencies_only(employees)
