"""
Competency validation: name checks, required competency coverage,
duplicate detection and the sanitize-and-merge step that leaves each
employee with one averaged score per competency.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from kinerja.validation.competencies import matches_requirement
from kinerja.validation.specs import (
    REQUIRED_COMPETENCIES,
    ValidationError,
    ValidationErrorType as E,
    ValidationLimits,
    ValidationWarning,
    ValidationWarningType as W,
)
from kinerja.validators.score import ScoreValidator

Issues = Tuple[List[ValidationError], List[ValidationWarning]]

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^\w\s\-()]")
_EDGE_DASHES_RE = re.compile(r"^-+|-+$")


def sanitize_competency_name(name: str) -> str:
    text = _WHITESPACE_RE.sub(" ", str(name))
    text = _DISALLOWED_RE.sub("", text)
    text = _EDGE_DASHES_RE.sub("", text.strip())
    return text.strip()


def normalize_competency_name(name: str) -> str:
    return sanitize_competency_name(name).lower()


def prettify_competency_name(normalized: str) -> str:
    """'kualitas kinerja' -> 'Kualitas Kinerja'."""
    return " ".join(word[:1].upper() + word[1:] for word in normalized.split(" ") if word)


class CompetencyValidator:
    def __init__(self, limits: Optional[ValidationLimits] = None):
        self.limits = limits or ValidationLimits.from_config()

    def validate_competencies(self, employees: List[Dict[str, Any]]) -> Issues:
        """Run every competency check, then sanitize and merge in place."""
        errors, warnings = self.validate_competency_names(employees)
        for check in (self.validate_required_competencies, self.detect_duplicate_competencies):
            e, w = check(employees)
            errors.extend(e)
            warnings.extend(w)
        self.apply_sanitize_and_merge(employees)
        return errors, warnings

    def validate_competency_name(self, name: Any) -> Tuple[bool, Optional[str], Optional[str]]:
        """Returns (is_valid, error, sanitized_name_if_changed)."""
        if name is None:
            return False, "Competency name is required", None
        if not isinstance(name, str):
            return False, "Competency name must be a string", None
        trimmed = name.strip()
        if not trimmed:
            return False, "Competency name cannot be empty", None
        if len(trimmed) < self.limits.min_competency_name_length:
            return False, "Competency name too short", None
        if len(trimmed) > self.limits.max_competency_name_length:
            return False, "Competency name too long", None

        sanitized = sanitize_competency_name(trimmed)
        return True, None, sanitized if sanitized != name else None

    def validate_competency_names(self, employees: List[Dict[str, Any]]) -> Issues:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []

        for emp in employees:
            if not isinstance(emp, dict) or not isinstance(emp.get("performance"), list):
                continue
            for perf in emp["performance"]:
                if not isinstance(perf, dict):
                    continue
                is_valid, error, sanitized = self.validate_competency_name(perf.get("name"))
                if not is_valid:
                    errors.append(ValidationError(
                        E.INVALID_COMPETENCY_NAME,
                        error or "Invalid competency name",
                        employee_name=emp.get("name"),
                        competency_name=str(perf.get("name")),
                    ))
                elif sanitized is not None:
                    warnings.append(ValidationWarning(
                        W.COMPETENCY_SANITIZED,
                        "Competency name was sanitized",
                        details=f"Sanitized to: {sanitized}",
                        employee_name=emp.get("name"),
                        competency_name=perf["name"],
                    ))

        return errors, warnings

    def validate_required_competencies(self, employees: List[Dict[str, Any]]) -> Issues:
        errors: List[ValidationError] = []
        records = [e for e in employees if isinstance(e, dict)]

        def names_of(emp: Dict[str, Any]) -> List[str]:
            return [
                normalize_competency_name(p["name"])
                for p in emp.get("performance") or []
                if isinstance(p, dict) and isinstance(p.get("name"), str)
            ]

        all_names = [n for emp in records for n in names_of(emp)]
        missing_overall = [
            req.name for req in REQUIRED_COMPETENCIES
            if not any(matches_requirement(n, req) for n in all_names)
        ]
        if missing_overall:
            errors.append(ValidationError(
                E.MISSING_COMPETENCY,
                "Required competencies missing from dataset",
                details=f"Missing: {', '.join(missing_overall)}",
                affected_count=len(missing_overall),
            ))

        for emp in records:
            names = names_of(emp)
            missing = [
                req.name for req in REQUIRED_COMPETENCIES
                if not any(matches_requirement(n, req) for n in names)
            ]
            if missing:
                errors.append(ValidationError(
                    E.MISSING_COMPETENCY,
                    "Employee missing required competencies",
                    details=f"Missing: {', '.join(missing)}",
                    employee_name=emp.get("name"),
                    affected_count=len(missing),
                ))

        return errors, []

    def detect_duplicate_competencies(self, employees: List[Dict[str, Any]]) -> Issues:
        warnings: List[ValidationWarning] = []

        for emp in employees:
            if not isinstance(emp, dict) or not isinstance(emp.get("performance"), list):
                continue
            seen: Dict[str, int] = {}
            for perf in emp["performance"]:
                if isinstance(perf, dict) and isinstance(perf.get("name"), str):
                    key = normalize_competency_name(perf["name"])
                    seen[key] = seen.get(key, 0) + 1
            duplicates = [name for name, count in seen.items() if count > 1]
            if duplicates:
                warnings.append(ValidationWarning(
                    W.COMPETENCY_MERGED,
                    "Duplicate competencies found and will be merged",
                    details=f"Duplicates: {', '.join(duplicates)}",
                    employee_name=emp.get("name"),
                    affected_count=len(duplicates),
                ))

        return [], warnings

    @staticmethod
    def sanitize_and_merge_competencies(performance: List[Any]) -> List[Dict[str, Any]]:
        """One entry per normalized name with the average of its valid scores.

        Entries without a name or without any valid score are dropped.
        """
        merged: Dict[str, List[float]] = {}
        for perf in performance:
            if not isinstance(perf, dict) or not perf.get("name"):
                continue
            key = normalize_competency_name(perf["name"])
            if not key:
                continue
            scores = merged.setdefault(key, [])
            if ScoreValidator.validate_single_score(perf.get("score")).normalized_score is not None:
                scores.append(perf["score"])

        return [
            {"name": prettify_competency_name(key), "score": round(sum(scores) / len(scores), 2)}
            for key, scores in merged.items()
            if scores
        ]

    def apply_sanitize_and_merge(self, employees: List[Dict[str, Any]]) -> None:
        for emp in employees:
            if isinstance(emp, dict) and isinstance(emp.get("performance"), list):
                emp["performance"] = self.sanitize_and_merge_competencies(emp["performance"])
