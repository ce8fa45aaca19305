"""
Employee record validation: dataset shape, required fields, names and
organizational levels.
"""

import re
from collections import Counter
from typing import Any, List, Optional, Tuple

from kinerja.validation.specs import (
    ValidationError,
    ValidationErrorType as E,
    ValidationLimits,
    ValidationWarning,
    ValidationWarningType as W,
)

REQUIRED_EMPLOYEE_FIELDS = ("name", "organizational_level")

VALID_ORG_LEVELS = (
    "Eselon",
    "Staff",
    "Kepala Dinas",
    "Sekretaris",
    "Kabid",
    "Kasubbid",
    "Pelaksana",
)

_INVALID_NAME_CHARS = re.compile(r"[<>{}\[\]\\|`~!@#$%^&*()_+=;:\"'?/]")

Issues = Tuple[List[ValidationError], List[ValidationWarning]]


class EmployeeValidator:
    def __init__(self, limits: Optional[ValidationLimits] = None):
        self.limits = limits or ValidationLimits.from_config()

    def validate_employee_structure(self, employees: Any) -> Issues:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []

        if not isinstance(employees, list):
            errors.append(ValidationError(
                E.CRITICAL_DATA,
                "Employee data must be an array",
                details=f"Received {type(employees).__name__}",
            ))
            return errors, warnings

        if not employees:
            errors.append(ValidationError(E.CRITICAL_DATA, "Employee dataset is empty"))
            warnings.append(ValidationWarning(
                W.PARTIAL_DATA,
                "No employee records to validate",
            ))
            return errors, warnings

        if len(employees) > self.limits.max_employees:
            errors.append(ValidationError(
                E.ARRAY_SIZE_EXCEEDED,
                f"Employee dataset too large: {len(employees)} records",
                details=f"Maximum allowed is {self.limits.max_employees}",
                affected_count=len(employees),
            ))

        names = Counter(
            emp["name"].strip().lower()
            for emp in employees
            if isinstance(emp, dict) and isinstance(emp.get("name"), str) and emp["name"].strip()
        )
        duplicates = sorted(name for name, count in names.items() if count > 1)
        if duplicates:
            errors.append(ValidationError(
                E.DUPLICATE_EMPLOYEE,
                "Duplicate employee names found",
                details=f"Duplicates: {', '.join(duplicates)}",
                affected_count=len(duplicates),
            ))

        incomplete = 0
        for index, emp in enumerate(employees):
            if not isinstance(emp, dict):
                errors.append(ValidationError(
                    E.CRITICAL_DATA,
                    f"Employee record at index {index} is not an object",
                ))
                continue

            missing = [f for f in REQUIRED_EMPLOYEE_FIELDS if not emp.get(f)]
            if missing:
                incomplete += 1
                errors.append(ValidationError(
                    E.CRITICAL_DATA,
                    f"Missing required employee fields: {', '.join(missing)}",
                    employee_name=emp.get("name") or f"Employee at index {index}",
                ))

        if incomplete:
            errors.append(ValidationError(
                E.MISSING_EMPLOYEE,
                "Employees with missing required fields found",
                affected_count=incomplete,
            ))

        return errors, warnings

    @staticmethod
    def validate_employee_name(name: Any) -> Tuple[bool, Optional[str]]:
        if not isinstance(name, str) or not name.strip():
            return False, "Employee name is required"
        stripped = name.strip()
        if len(stripped) < 2:
            return False, "Employee name must be at least 2 characters"
        if len(stripped) > 100:
            return False, "Employee name must be at most 100 characters"
        if _INVALID_NAME_CHARS.search(stripped):
            return False, "Employee name contains invalid characters"
        return True, None

    @staticmethod
    def validate_organizational_level(level: Any) -> Tuple[bool, Optional[str]]:
        if not isinstance(level, str) or not level.strip():
            return False, "Organizational level is required"
        lowered = level.lower()
        if any(valid.lower() in lowered for valid in VALID_ORG_LEVELS):
            return True, None
        return False, f"Unrecognized organizational level: {level}"
