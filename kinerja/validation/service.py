"""
Performance data validation service.

Multi-pass validation of an uploaded employee dataset:

    1. basic structure       5. merge duplicate competencies
    2. collection sizes      6. required competency coverage
    3. repeated entries      7. score ranges
    4. sanitize names        8. data quality heuristics

followed by a summary with completeness and score quality. Competency
names are sanitized and merged in place, so the caller's records come
out cleaned.
"""

import math
from collections import Counter
from typing import Any, Dict, List, Optional

from kinerja.core.config import get_config_value
from kinerja.core.logging import get_logger
from kinerja.validation.competencies import (
    missing_requirements,
    normalize_competency_name,
    sanitize_competency_name,
)
from kinerja.validation.specs import (
    REQUIRED_COMPETENCIES,
    STAFF_OTHER,
    ScoreQuality,
    ValidationError,
    ValidationErrorType as E,
    ValidationLimits,
    ValidationResult,
    ValidationSeverity,
    ValidationSummary,
    ValidationWarning,
    ValidationWarningType as W,
    performance_of,
)

logger = get_logger("kinerja.validation")


def is_numeric_score(value: Any) -> bool:
    """True for real, finite-or-infinite numbers (bool excluded), False for NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def count_scores(employees: List[Dict[str, Any]]) -> int:
    return sum(
        1
        for emp in employees
        for perf in performance_of(emp)
        if isinstance(perf, dict) and is_numeric_score(perf.get("score"))
    )


def calculate_completeness(employees: List[Any]) -> float:
    """Share of expected competency scores present, as a 0-100 percentage.

    Only numeric scores count; entries holding text or NaN are not present.
    """
    if not employees:
        return 0.0
    expected = len(employees) * len(REQUIRED_COMPETENCIES)
    return round(min(100.0, count_scores(employees) / expected * 100), 2)


def name_key(value: Any) -> str:
    """Hashable key for a record field that may hold any JSON value."""
    return "" if value is None else str(value)


def nesting_depth(value: Any, limit: int, _depth: int = 0) -> int:
    """Container nesting depth of ``value``, counted no further than ``limit + 1``."""
    if _depth > limit or not isinstance(value, (dict, list)):
        return _depth
    children = value.values() if isinstance(value, dict) else value
    return max((nesting_depth(c, limit, _depth + 1) for c in children), default=_depth)


def grade_score_quality(completeness: float, error_count: int) -> ScoreQuality:
    if completeness >= 90 and error_count == 0:
        return ScoreQuality.EXCELLENT
    if completeness >= 80 and error_count <= 2:
        return ScoreQuality.GOOD
    if completeness >= 70 and error_count <= 5:
        return ScoreQuality.FAIR
    return ScoreQuality.POOR


def build_summary(
    employees: List[Any],
    errors: List[ValidationError],
) -> ValidationSummary:
    """Dataset summary shared by the service and the validator orchestrator."""
    employees = employees if isinstance(employees, list) else []
    named_errors = {name_key(e.employee_name) for e in errors if e.employee_name}
    valid = [
        emp for emp in employees
        if performance_of(emp) and name_key(emp.get("name")) not in named_errors
    ]

    competency_names = {
        normalize_competency_name(perf["name"])
        for emp in employees
        for perf in performance_of(emp)
        if isinstance(perf, dict) and isinstance(perf.get("name"), str)
    }
    missing = missing_requirements(competency_names)
    found = [req.name for req in REQUIRED_COMPETENCIES if req not in missing]

    completeness = calculate_completeness(employees)
    return ValidationSummary(
        total_employees=len(employees),
        valid_employees=len(valid),
        invalid_employees=len(employees) - len(valid),
        total_competencies=len(competency_names),
        required_competencies=found,
        missing_competencies=[req.name for req in missing],
        data_completeness=completeness,
        score_quality=grade_score_quality(completeness, len(errors)),
    )


class PerformanceDataValidator:
    """Runs the validation passes over one dataset.

    A validator instance holds per-run state; ``validate`` resets it, so an
    instance can be reused sequentially.
    """

    def __init__(self, limits: Optional[ValidationLimits] = None):
        self.limits = limits or ValidationLimits.from_config()
        self.low_score_threshold = float(
            get_config_value("validation", "low_score_threshold", default=60)
        )
        self.missing_error_threshold = int(
            get_config_value("validation", "missing_competency_error_threshold", default=3)
        )
        self.staff_other_ratio = float(
            get_config_value("validation", "staff_other_ratio_warning", default=0.5)
        )
        self.min_competencies = int(
            get_config_value("validation", "min_competencies_per_employee", default=3)
        )
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationWarning] = []

    def _error(self, type_: E, message: str, **kwargs) -> None:
        self.errors.append(ValidationError(type=type_, message=message, **kwargs))

    def _warn(self, type_: W, message: str, **kwargs) -> None:
        self.warnings.append(ValidationWarning(type=type_, message=message, **kwargs))

    def validate(self, employees: List[Dict[str, Any]]) -> ValidationResult:
        self.errors = []
        self.warnings = []

        if self._check_structure(employees):
            self._check_sizes(employees)
            self._check_repeated_entries(employees)
            self._sanitize_names(employees)
            self._merge_duplicates(employees)
            self._check_competencies(employees)
            self._check_scores(employees)
            self._check_data_quality(employees)

        summary = build_summary(employees, self.errors)
        result = ValidationResult(
            is_valid=not self.errors,
            errors=list(self.errors),
            warnings=list(self.warnings),
            summary=summary,
        )
        logger.info(
            "Validated %d employees: %d errors, %d warnings, %.2f%% complete",
            summary.total_employees, len(result.errors), len(result.warnings),
            summary.data_completeness,
        )
        return result

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _check_structure(self, employees: List[Dict[str, Any]]) -> bool:
        if not isinstance(employees, list) or not employees:
            self._error(
                E.CRITICAL_DATA,
                "No employee data found",
                details="The uploaded file contains no valid employee records",
            )
            return False

        names = Counter(
            emp["name"] for emp in employees
            if isinstance(emp, dict) and isinstance(emp.get("name"), str) and emp["name"]
        )
        duplicates = sorted(name for name, count in names.items() if count > 1)
        if duplicates:
            self._error(
                E.DUPLICATE_EMPLOYEE,
                "Duplicate employee names found",
                details=f"Duplicates: {', '.join(duplicates)}",
                affected_count=len(duplicates),
            )

        nameless = [
            emp for emp in employees
            if not isinstance(emp, dict) or not str(emp.get("name") or "").strip()
        ]
        if nameless:
            self._error(
                E.MISSING_EMPLOYEE,
                "Employees with missing names found",
                affected_count=len(nameless),
            )
        return True

    def _check_sizes(self, employees: List[Dict[str, Any]]) -> None:
        """Report oversized collections. Later passes still run."""
        if len(employees) > self.limits.max_array_size:
            self._error(
                E.ARRAY_SIZE_EXCEEDED,
                f"Too many employees: {len(employees)} exceeds limit of {self.limits.max_array_size}",
                affected_count=len(employees),
            )
            return

        for emp in employees:
            perf = performance_of(emp)
            if len(perf) > self.limits.max_competency_count:
                self._error(
                    E.ARRAY_SIZE_EXCEEDED,
                    f"Too many competencies for employee: {len(perf)} exceeds limit "
                    f"of {self.limits.max_competency_count}",
                    employee_name=emp.get("name"),
                    affected_count=len(perf),
                )

    def _check_repeated_entries(self, employees: List[Dict[str, Any]]) -> None:
        max_depth = self.limits.max_circular_reference_depth
        seen_employees = set()
        for emp in employees:
            if not isinstance(emp, dict):
                continue
            if nesting_depth(emp, max_depth) > max_depth:
                self._error(
                    E.CIRCULAR_REFERENCE,
                    "Circular reference detected in employee data",
                    details=f"Maximum reference depth ({max_depth}) exceeded",
                    employee_name=emp.get("name"),
                )
                continue

            # (id, name) seen before means the same record was listed twice
            key = (name_key(emp.get("id")), name_key(emp.get("name")))
            if key in seen_employees:
                self._error(
                    E.CIRCULAR_REFERENCE,
                    "Circular reference detected",
                    details="Employee data contains circular references",
                    employee_name=emp.get("name"),
                )
                continue
            seen_employees.add(key)

            names = [
                perf["name"].lower() for perf in performance_of(emp)
                if isinstance(perf, dict) and isinstance(perf.get("name"), str)
            ]
            repeated = [name for index, name in enumerate(names) if names.index(name) != index]
            if repeated:
                self._warn(
                    W.QUALITY_CONCERN,
                    "Potential circular reference in competency names",
                    details=f"Duplicate competency references: {', '.join(repeated)}",
                    employee_name=emp.get("name"),
                    affected_count=len(repeated),
                )

    def _sanitize_names(self, employees: List[Dict[str, Any]]) -> None:
        min_len = self.limits.min_competency_name_length
        max_len = self.limits.max_competency_name_length

        for emp in employees:
            for perf in performance_of(emp):
                if not isinstance(perf, dict):
                    continue
                name = perf.get("name")
                if not isinstance(name, str) or not (min_len <= len(name) <= max_len):
                    shown = name if not isinstance(name, str) or len(name) <= 50 else f"{name[:50]}..."
                    self._error(
                        E.INVALID_COMPETENCY_NAME,
                        "Invalid competency name",
                        details=f"Name must be between {min_len} and {max_len} characters",
                        employee_name=emp.get("name"),
                        competency_name=str(shown) if shown is not None else None,
                    )
                    continue

                cleaned = sanitize_competency_name(name)
                if cleaned != name:
                    self._warn(
                        W.COMPETENCY_SANITIZED,
                        "Competency name was sanitized",
                        details=f'"{name}" -> "{cleaned}"',
                        employee_name=emp.get("name"),
                        competency_name=cleaned,
                    )
                    perf["name"] = cleaned

    def _merge_duplicates(self, employees: List[Dict[str, Any]]) -> None:
        for emp in employees:
            perf_list = performance_of(emp)
            if not perf_list:
                continue

            groups: Dict[str, List[Dict[str, Any]]] = {}
            passthrough: List[Any] = []
            for perf in perf_list:
                if isinstance(perf, dict) and isinstance(perf.get("name"), str):
                    groups.setdefault(normalize_competency_name(perf["name"]), []).append(perf)
                else:
                    passthrough.append(perf)

            merged: List[Any] = []
            for group in groups.values():
                if len(group) == 1:
                    merged.append(group[0])
                    continue

                scores = [p["score"] for p in group if is_numeric_score(p.get("score"))]
                best_name = max((p["name"] for p in group), key=len)
                entry = dict(group[0])
                entry["name"] = best_name
                if scores:
                    entry["score"] = round(sum(scores) / len(scores), 2)
                merged.append(entry)

                self._warn(
                    W.COMPETENCY_MERGED,
                    "Duplicate competencies merged",
                    details=f"Merged {len(group)} entries: {', '.join(p['name'] for p in group)}",
                    employee_name=emp.get("name"),
                    competency_name=best_name,
                    affected_count=len(group),
                )

            emp["performance"] = merged + passthrough

    def _check_competencies(self, employees: List[Dict[str, Any]]) -> None:
        all_names = {
            normalize_competency_name(perf["name"])
            for emp in employees
            for perf in performance_of(emp)
            if isinstance(perf, dict) and isinstance(perf.get("name"), str)
        }
        missing_overall = missing_requirements(all_names)
        if missing_overall:
            self._error(
                E.MISSING_COMPETENCY,
                "Required competencies missing from dataset",
                details=f"Missing: {', '.join(r.name for r in missing_overall)}",
                affected_count=len(missing_overall),
            )

        for emp in employees:
            if not isinstance(emp, dict):
                continue
            perf_list = performance_of(emp)
            if not perf_list:
                self._error(
                    E.MISSING_COMPETENCY,
                    "Employee has no performance data",
                    employee_name=emp.get("name"),
                )
                continue

            names = [
                normalize_competency_name(p["name"])
                for p in perf_list
                if isinstance(p, dict) and isinstance(p.get("name"), str)
            ]
            missing = missing_requirements(names)
            if not missing:
                continue
            details = f"Missing: {', '.join(r.name for r in missing)}"
            if len(missing) >= self.missing_error_threshold:
                self._error(
                    E.MISSING_COMPETENCY,
                    "Employee missing critical competencies",
                    employee_name=emp.get("name"),
                    details=details,
                    affected_count=len(missing),
                )
            else:
                self._warn(
                    W.PARTIAL_DATA,
                    "Employee missing some competencies",
                    employee_name=emp.get("name"),
                    details=details,
                    affected_count=len(missing),
                )

    def _check_scores(self, employees: List[Dict[str, Any]]) -> None:
        for emp in employees:
            for perf in performance_of(emp):
                if not isinstance(perf, dict):
                    continue
                score = perf.get("score")
                if not is_numeric_score(score):
                    self._error(
                        E.INVALID_SCORE,
                        "Invalid score value",
                        details=f"Score must be a number, got: {score!r}",
                        employee_name=emp.get("name"),
                        competency_name=perf.get("name"),
                    )
                elif score < 0 or score > 100:
                    self._error(
                        E.INVALID_SCORE,
                        "Score out of valid range",
                        details=f"Score {score} is outside 0-100 range",
                        employee_name=emp.get("name"),
                        competency_name=perf.get("name"),
                    )
                elif score < self.low_score_threshold:
                    self._warn(
                        W.QUALITY_CONCERN,
                        "Low performance score detected",
                        details=f"Score {score} is below {self.low_score_threshold:g}",
                        employee_name=emp.get("name"),
                        competency_name=perf.get("name"),
                    )

    def _check_data_quality(self, employees: List[Dict[str, Any]]) -> None:
        records = [emp for emp in employees if isinstance(emp, dict)]

        without_level = [emp for emp in records if not emp.get("organizational_level")]
        if without_level:
            self._warn(
                W.ORG_LEVEL_DEFAULT,
                "Some employees missing organizational level",
                details=f"Will default to {STAFF_OTHER} for scoring calculations",
                affected_count=len(without_level),
            )

        staff_other = [emp for emp in records if emp.get("organizational_level") == STAFF_OTHER]
        if records and len(staff_other) / len(records) > self.staff_other_ratio:
            self._warn(
                W.QUALITY_CONCERN,
                "High number of employees with default organizational level",
                details=f"{len(staff_other)} employees are categorized as {STAFF_OTHER}",
                affected_count=len(staff_other),
            )

        for emp in records:
            perf_list = performance_of(emp)
            if perf_list and len(perf_list) < self.min_competencies:
                self._warn(
                    W.PARTIAL_DATA,
                    "Employee has limited competency data",
                    details=f"Only {len(perf_list)} competencies found",
                    employee_name=emp.get("name"),
                    affected_count=len(perf_list),
                )


def validate_performance_data(employees: List[Dict[str, Any]]) -> ValidationResult:
    """Validate a dataset with a fresh validator."""
    return PerformanceDataValidator().validate(employees)


def get_validation_severity(result: ValidationResult) -> ValidationSeverity:
    if not result.errors and not result.warnings:
        return ValidationSeverity.SUCCESS
    if result.errors_of(E.CRITICAL_DATA, E.MISSING_EMPLOYEE):
        return ValidationSeverity.CRITICAL
    if result.errors:
        return ValidationSeverity.ERROR
    return ValidationSeverity.WARNING


def get_validation_message(result: ValidationResult) -> str:
    severity = get_validation_severity(result)
    if severity == ValidationSeverity.SUCCESS:
        return (
            f"Data validation passed! {result.summary.valid_employees} employees "
            f"with {result.summary.data_completeness:g}% completeness."
        )
    if severity == ValidationSeverity.WARNING:
        return (
            f"Data imported with {len(result.warnings)} warnings. "
            "Review data quality before proceeding."
        )
    if severity == ValidationSeverity.ERROR:
        return (
            f"Data validation failed with {len(result.errors)} errors. "
            "Please fix issues before proceeding."
        )
    return "Critical data issues found. Cannot proceed with current dataset."
