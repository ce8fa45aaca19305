"""
Record auto-fixes, default values, quality scoring and user-facing
recovery advice / error reports.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from kinerja.integrity.specs import IntegrityResult, RecoveryOption, RecoveryType
from kinerja.validation.specs import STAFF_OTHER, ValidationResult

DEFAULT_VALUES: Dict[str, str] = {
    "nip": "N/A",
    "gol": "N/A",
    "pangkat": "N/A",
    "position": "Staff",
    "sub_position": "General",
    "organizational_level": STAFF_OTHER,
}


@dataclass
class OperationMetadata:
    operation: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    records_processed: int = 0
    records_recovered: int = 0
    data_quality_score: int = 0


@dataclass
class RecoveryAdvice:
    can_proceed: bool
    requires_user_action: bool
    recommendations: List[str]
    actions: List[Dict[str, str]]


def generate_employee_name() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"Employee_{stamp}_{uuid.uuid4().hex[:9]}"


def _fix_score(score: Any) -> Tuple[Any, bool]:
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
        return 0, True
    if score < 0:
        return 0, True
    if score > 100:
        return 100, True
    return score, False


def apply_auto_fixes(data: List[Any]) -> Tuple[List[Dict[str, Any]], int]:
    """Fix what can be fixed safely. Returns (records, number of records changed)."""
    fixed_records: List[Dict[str, Any]] = []
    fixed_count = 0

    for item in data:
        record = dict(item) if isinstance(item, dict) else {}
        changed = not isinstance(item, dict)

        if not isinstance(record.get("name"), str) or not record["name"].strip():
            record["name"] = generate_employee_name()
            changed = True

        if not isinstance(record.get("performance"), list):
            record["performance"] = []
            changed = True
        else:
            performance = []
            for perf in record["performance"]:
                if not isinstance(perf, dict):
                    changed = True
                    continue
                score, score_changed = _fix_score(perf.get("score"))
                if score_changed:
                    perf = {**perf, "score": score}
                    changed = True
                performance.append(perf)
            record["performance"] = performance

        if not record.get("organizational_level"):
            record["organizational_level"] = STAFF_OTHER
            changed = True

        if changed:
            fixed_count += 1
        fixed_records.append(record)

    return fixed_records, fixed_count


def apply_default_values(data: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], int]:
    """Fill empty profile fields. Returns (records, number of records changed)."""
    records: List[Dict[str, Any]] = []
    modified = 0
    for item in data:
        record = dict(item)
        missing = [key for key in DEFAULT_VALUES if not record.get(key)]
        for key in missing:
            record[key] = DEFAULT_VALUES[key]
        if missing:
            modified += 1
        records.append(record)
    return records, modified


def calculate_quality_score(
    integrity: Optional[IntegrityResult],
    validation: Optional[ValidationResult],
) -> int:
    score = integrity.summary.integrity_score if integrity is not None else 100
    if validation is not None:
        score -= len(validation.errors) * 5 + len(validation.warnings) * 2
    return max(0, round(score))


def get_quality_level(score: float) -> str:
    if score >= 90:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 40:
        return "fair"
    return "poor"


def analyze_recovery_options(
    success: bool,
    data_quality_score: float,
    recovery_options: List[RecoveryOption],
) -> RecoveryAdvice:
    requires_user_action = any(
        opt.type in (RecoveryType.USER_INPUT_REQUIRED, RecoveryType.MANUAL_REVIEW)
        for opt in recovery_options
    )

    if data_quality_score >= 90:
        recommendation = "Data quality is excellent. Safe to proceed."
    elif data_quality_score >= 70:
        recommendation = "Data quality is acceptable with minor issues."
    elif data_quality_score >= 40:
        recommendation = "Data quality has significant issues. Review recommended."
    else:
        recommendation = "Data quality is poor. Manual intervention required."

    return RecoveryAdvice(
        can_proceed=success or data_quality_score >= 70,
        requires_user_action=requires_user_action,
        recommendations=[recommendation],
        actions=[
            {"label": opt.description, "action": opt.action, "risk": opt.risk_level.value}
            for opt in recovery_options
        ],
    )


def generate_error_report(
    metadata: OperationMetadata,
    errors: List[str],
    warnings: List[str],
    recovery_options: List[RecoveryOption],
) -> str:
    lines = [
        "=== Data Integrity Report ===",
        f"Operation: {metadata.operation}",
        f"Timestamp: {metadata.timestamp}",
        f"Records Processed: {metadata.records_processed}",
        f"Records Recovered: {metadata.records_recovered}",
        f"Data Quality Score: {metadata.data_quality_score}/100",
        "",
    ]

    if errors:
        lines.append("ERRORS:")
        lines.extend(f"{i}. {e}" for i, e in enumerate(errors, start=1))
        lines.append("")

    if warnings:
        lines.append("WARNINGS:")
        lines.extend(f"{i}. {w}" for i, w in enumerate(warnings, start=1))
        lines.append("")

    if recovery_options:
        lines.append("RECOVERY OPTIONS:")
        for i, opt in enumerate(recovery_options, start=1):
            lines.extend([
                f"{i}. {opt.description}",
                f"   Action: {opt.action}",
                f"   Confidence: {opt.confidence}",
                f"   Risk Level: {opt.risk_level.value}",
                "",
            ])

    return "\n".join(lines)
