"""
Composable validators for employee performance data.
"""

from kinerja.validators.competency import CompetencyValidator
from kinerja.validators.employee import EmployeeValidator
from kinerja.validators.orchestrator import (
    ValidationOptions,
    ValidatorOrchestrator,
    create_validator_orchestrator,
    validate_all,
    validate_competencies_only,
    validate_employee_data,
    validate_employees_only,
    validate_scores_only,
    validate_selective,
)
from kinerja.validators.score import ScoreCheck, ScoreValidator

__all__ = [
    "CompetencyValidator",
    "EmployeeValidator",
    "ScoreCheck",
    "ScoreValidator",
    "ValidationOptions",
    "ValidatorOrchestrator",
    "create_validator_orchestrator",
    "validate_all",
    "validate_competencies_only",
    "validate_employee_data",
    "validate_employees_only",
    "validate_scores_only",
    "validate_selective",
]
