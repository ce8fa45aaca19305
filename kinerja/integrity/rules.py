"""
Integrity rules for raw JSON text and decoded employee records.

Each rule appends to the ``errors`` / ``warnings`` lists it is given.
"""

import json
import math
import re
import unicodedata
from typing import Any, List, Optional

from kinerja.integrity.specs import (
    IntegrityError,
    IntegrityErrorType as IE,
    IntegrityWarning,
    IntegrityWarningType as IW,
    Severity,
)

PERFORMANCE_SCORE_INVALID_MESSAGE = "Performance score is not a valid number"

# Decoder messages that point at fixable syntax rather than garbage input
_RECOVERABLE_DECODE_MESSAGES = (
    "Expecting",
    "Unterminated string",
    "Extra data",
    "Invalid control character",
    "Invalid \\escape",
)

_ESCAPED_UNICODE_RE = re.compile(r"\\u[0-9a-fA-F]{4}")
_MOJIBAKE = "\u00e2\u20ac"  # UTF-8 punctuation decoded as cp1252


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def is_recoverable_json_error(raw: str, error: Exception) -> bool:
    if not raw.strip() or "{" not in raw or "}" not in raw:
        return False
    message = getattr(error, "msg", str(error))
    return any(message.startswith(m) for m in _RECOVERABLE_DECODE_MESSAGES)


def check_raw_json(
    raw: Any,
    parsed: Any,
    errors: List[IntegrityError],
) -> Optional[Any]:
    """Decode ``raw``; returns the decoded value, or None when decoding failed."""
    if not isinstance(raw, str) or not raw.strip():
        errors.append(IntegrityError(
            IE.JSON_PARSE_ERROR,
            "Invalid raw data provided",
            details="Raw data is null, empty, or not a string",
            severity=Severity.CRITICAL,
            recoverable=False,
        ))
        return None

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        errors.append(IntegrityError(
            IE.JSON_PARSE_ERROR,
            "JSON parsing failed",
            details=f"Parse error: {exc}",
            severity=Severity.CRITICAL,
            recoverable=is_recoverable_json_error(raw, exc),
        ))
        return None

    if parsed is not None and parsed != decoded:
        errors.append(IntegrityError(
            IE.DATA_CORRUPTION,
            "Parsed data does not match raw JSON data",
            details="Data corruption detected during parsing process",
            severity=Severity.HIGH,
            recoverable=True,
        ))
    return decoded


def check_structure(
    data: Any,
    errors: List[IntegrityError],
    warnings: List[IntegrityWarning],
) -> None:
    if data is None:
        errors.append(IntegrityError(
            IE.CRITICAL_DATA_LOSS,
            "Data is null or undefined",
            details="Complete data loss detected",
            severity=Severity.CRITICAL,
            recoverable=False,
        ))
        return

    if not isinstance(data, list):
        warnings.append(IntegrityWarning(
            IW.FORMAT_ANOMALY,
            "Data is not in expected array format",
            details=f"Expected array, got {_type_name(data)}",
        ))
        return

    if not data:
        warnings.append(IntegrityWarning(
            IW.DATA_INCONSISTENCY,
            "Empty data array",
            details="No employee records found in data",
        ))
        return

    for index, record in enumerate(data):
        check_record(record, index, errors, warnings)


def check_record(
    record: Any,
    index: int,
    errors: List[IntegrityError],
    warnings: List[IntegrityWarning],
) -> None:
    if record is None:
        errors.append(IntegrityError(
            IE.CRITICAL_DATA_LOSS,
            "Employee record is null/undefined",
            details=f"Employee at index {index} is completely missing",
            severity=Severity.HIGH,
            recoverable=False,
        ))
        return

    if not isinstance(record, dict):
        errors.append(IntegrityError(
            IE.SCHEMA_VIOLATION,
            "Employee record is not an object",
            details=f"Employee at index {index} is not an object",
            severity=Severity.HIGH,
            recoverable=False,
        ))
        return

    name = record.get("name") if isinstance(record.get("name"), str) else None
    if not name:
        errors.append(IntegrityError(
            IE.SCHEMA_VIOLATION,
            "Missing required field: name",
            details="Employee record missing critical field: name",
            severity=Severity.HIGH,
            recoverable=True,
            employee_name=f"Employee at index {index}",
            field_name="name",
        ))

    if "performance" in record:
        check_performance(record["performance"], name or f"Employee at index {index}", errors, warnings)


def check_performance(
    performance: Any,
    employee_name: str,
    errors: List[IntegrityError],
    warnings: List[IntegrityWarning],
) -> None:
    if performance is None:
        warnings.append(IntegrityWarning(
            IW.PARTIAL_CORRUPTION,
            "Performance data is null",
            details="Employee has null performance data",
            employee_name=employee_name,
            field_name="performance",
        ))
        return

    if not isinstance(performance, list):
        errors.append(IntegrityError(
            IE.SCHEMA_VIOLATION,
            "Performance data is not an array",
            details=f"Expected array, got {_type_name(performance)}",
            severity=Severity.MEDIUM,
            recoverable=True,
            employee_name=employee_name,
            field_name="performance",
        ))
        return

    for index, entry in enumerate(performance):
        if entry is None:
            errors.append(IntegrityError(
                IE.DATA_CORRUPTION,
                "Performance entry is null/undefined",
                details=f"Performance entry {index} is missing",
                severity=Severity.MEDIUM,
                recoverable=True,
                employee_name=employee_name,
            ))
            continue
        if not isinstance(entry, dict):
            errors.append(IntegrityError(
                IE.SCHEMA_VIOLATION,
                "Performance entry is not an object",
                details=f"Performance entry {index} is not an object",
                severity=Severity.MEDIUM,
                recoverable=True,
                employee_name=employee_name,
            ))
            continue

        if not isinstance(entry.get("name"), str) or not entry["name"]:
            errors.append(IntegrityError(
                IE.SCHEMA_VIOLATION,
                "Performance entry missing competency name",
                details=f"Performance entry {index} has invalid or missing name",
                severity=Severity.MEDIUM,
                recoverable=True,
                employee_name=employee_name,
                field_name="performance.name",
            ))

        score = entry.get("score")
        if score is None:
            errors.append(IntegrityError(
                IE.SCHEMA_VIOLATION,
                "Performance entry missing score",
                details=f"Performance entry {index} has missing score",
                severity=Severity.MEDIUM,
                recoverable=True,
                employee_name=employee_name,
                field_name="performance.score",
            ))
        elif isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
            errors.append(IntegrityError(
                IE.DATA_CORRUPTION,
                PERFORMANCE_SCORE_INVALID_MESSAGE,
                details=f"Performance entry {index} has invalid score: {score!r}",
                severity=Severity.MEDIUM,
                recoverable=True,
                employee_name=employee_name,
                field_name="performance.score",
            ))
        elif not 0 <= score <= 100:
            warnings.append(IntegrityWarning(
                IW.DATA_INCONSISTENCY,
                "Performance score out of expected range",
                details=f"Score {score} is outside 0-100 range",
                employee_name=employee_name,
                field_name="performance.score",
            ))


def has_encoding_issues(text: Any) -> bool:
    """Replacement characters, control characters, escaped unicode or mojibake."""
    if not isinstance(text, str):
        return False
    if "\ufffd" in text or _MOJIBAKE in text or _ESCAPED_UNICODE_RE.search(text):
        return True
    return any(unicodedata.category(ch) == "Cc" and ch not in "\t\n\r" for ch in text)


def check_duplicate_competencies(
    employee: dict, warnings: List[IntegrityWarning]
) -> None:
    names = [
        p["name"].lower() for p in employee.get("performance") or []
        if isinstance(p, dict) and isinstance(p.get("name"), str)
    ]
    if len(names) != len(set(names)):
        warnings.append(IntegrityWarning(
            IW.DATA_INCONSISTENCY,
            "Duplicate competencies found",
            details="Employee has duplicate competency entries",
            employee_name=employee.get("name"),
        ))


def check_encoding(employee: dict, warnings: List[IntegrityWarning]) -> None:
    for field_name in ("name", "nip", "position", "organizational_level"):
        if has_encoding_issues(employee.get(field_name)):
            warnings.append(IntegrityWarning(
                IW.ENCODING_ISSUE,
                "Potential encoding issues detected",
                details=f"Text field contains suspicious characters: {field_name}",
                employee_name=employee.get("name"),
                field_name=field_name,
            ))

    for perf in employee.get("performance") or []:
        if isinstance(perf, dict) and has_encoding_issues(perf.get("name")):
            warnings.append(IntegrityWarning(
                IW.ENCODING_ISSUE,
                "Competency name has encoding issues",
                details=f"Competency name contains suspicious characters: {perf['name']}",
                employee_name=employee.get("name"),
                field_name="performance.name",
            ))
