"""Tests for JSON and record integrity checks."""

import json

import pytest

from kinerja.integrity import rules
from kinerja.integrity.service import (
    calculate_integrity_score,
    determine_recommended_action,
    get_integrity_message,
    get_recovery_recommendation,
    validate_json_integrity,
    validate_performance_data_integrity,
)
from kinerja.integrity.specs import (
    IntegrityError,
    IntegrityErrorType as IE,
    IntegrityWarningType as IW,
    RecommendedAction,
    RecoveryType,
    Severity,
)


class TestJsonIntegrity:
    def test_valid_json(self, sample_employees):
        result = validate_json_integrity(json.dumps(sample_employees))
        assert result.is_valid
        assert not result.has_corruption
        assert result.summary.total_records == 2
        assert result.summary.integrity_score == 100
        assert get_integrity_message(result) == "Data integrity validation passed successfully"

    def test_empty_input(self):
        result = validate_json_integrity("   ")
        assert result.errors[0].message == "Invalid raw data provided"
        assert result.errors[0].severity == Severity.CRITICAL
        assert not result.errors[0].recoverable

    def test_trailing_comma_is_recoverable(self):
        result = validate_json_integrity('[{"name": "Siti", "performance": []},]')
        error = result.errors[0]
        assert error.type == IE.JSON_PARSE_ERROR
        assert error.recoverable
        assert result.summary.integrity_score == 75
        assert [o.type for o in result.recovery_options] == [RecoveryType.MANUAL_REVIEW]

    def test_garbage_is_not_recoverable(self):
        result = validate_json_integrity("not json at all")
        assert not result.errors[0].recoverable
        assert RecoveryType.USER_INPUT_REQUIRED in [o.type for o in result.recovery_options]

    def test_parsed_mismatch(self):
        result = validate_json_integrity('[{"name": "Siti"}]', parsed=[{"name": "Budi"}])
        assert result.errors[0].type == IE.DATA_CORRUPTION
        assert result.has_corruption

    def test_object_instead_of_array(self):
        result = validate_json_integrity('{"name": "Siti"}')
        assert result.is_valid
        assert result.warnings[0].type == IW.FORMAT_ANOMALY
        assert result.warnings[0].details == "Expected array, got dict"

    def test_null_document(self):
        result = validate_json_integrity("null")
        assert result.errors[0].type == IE.CRITICAL_DATA_LOSS

    def test_empty_array(self):
        result = validate_json_integrity("[]")
        assert result.warnings[0].message == "Empty data array"

    def test_record_problems(self):
        raw = json.dumps([
            None,
            "Siti",
            {"performance": [{"name": "Kepemimpinan", "score": 80}]},
            {"name": "Budi", "performance": [
                None,
                {"score": 80},
                {"name": "Kepemimpinan"},
                {"name": "Kualitas kinerja", "score": "tinggi"},
                {"name": "Kemampuan berkomunikasi", "score": 140},
            ]},
            {"name": "Rina", "performance": None},
            {"name": "Dewi", "performance": "80"},
        ])
        result = validate_json_integrity(raw)
        messages = [e.message for e in result.errors]
        assert messages == [
            "Employee record is null/undefined",
            "Employee record is not an object",
            "Missing required field: name",
            "Performance entry is null/undefined",
            "Performance entry missing competency name",
            "Performance entry missing score",
            rules.PERFORMANCE_SCORE_INVALID_MESSAGE,
            "Performance data is not an array",
        ]
        warnings = [w.message for w in result.warnings]
        assert "Performance score out of expected range" in warnings
        assert "Performance data is null" in warnings
        assert result.summary.recommended_action == RecommendedAction.ABORT


class TestRecordIntegrity:
    def test_clean_records(self, sample_employees):
        result = validate_performance_data_integrity(sample_employees)
        assert result.is_valid
        assert result.warnings == []

    def test_duplicates_and_encoding(self, employee_factory):
        emp = employee_factory(
            "Siti\ufffd",
            scores=[("Kepemimpinan", 80), ("kepemimpinan", 90), ("Kerja\u0007sama", 70)],
        )
        result = validate_performance_data_integrity([emp])
        types = [w.type for w in result.warnings]
        assert IW.DATA_INCONSISTENCY in types
        assert IW.ENCODING_ISSUE in types
        assert any(w.field_name == "performance.name" for w in result.warnings)

    def test_validation_errors_become_schema_violations(self, employee_factory):
        emp = employee_factory("Siti", scores=[("Kepemimpinan", 150)])
        result = validate_performance_data_integrity([emp])
        assert not result.is_valid
        assert all(e.type == IE.SCHEMA_VIOLATION for e in result.errors)
        assert any(e.severity == Severity.HIGH for e in result.errors)
        assert get_integrity_message(result).startswith("Significant data integrity issues")


class TestEncodingDetection:
    def test_clean_text(self):
        assert not rules.has_encoding_issues("Siti Rahmawati")
        assert not rules.has_encoding_issues(None)

    def test_suspicious_text(self):
        assert rules.has_encoding_issues("Siti \ufffd")
        assert rules.has_encoding_issues("caf\\u00e9")
        assert rules.has_encoding_issues("don\u00e2\u20ac\u2122t")
        assert rules.has_encoding_issues("tab\x00null")

    def test_recoverable_decode_messages(self):
        with pytest.raises(json.JSONDecodeError) as info:
            json.loads('{"a": 1,}')
        assert rules.is_recoverable_json_error('{"a": 1,}', info.value)
        assert not rules.is_recoverable_json_error("a: 1,", info.value)


class TestScoring:
    def test_penalties(self):
        errors = [
            IntegrityError(IE.SCHEMA_VIOLATION, "x", severity=Severity.CRITICAL),
            IntegrityError(IE.SCHEMA_VIOLATION, "x", severity=Severity.HIGH),
            IntegrityError(IE.SCHEMA_VIOLATION, "x", severity=Severity.MEDIUM),
            IntegrityError(IE.SCHEMA_VIOLATION, "x", severity=Severity.LOW),
        ]
        assert calculate_integrity_score(errors) == 45
        assert calculate_integrity_score(errors * 3) == 0

    def test_recommended_action(self):
        assert determine_recommended_action(95) == RecommendedAction.PROCEED
        assert determine_recommended_action(75) == RecommendedAction.REVIEW_REQUIRED
        assert determine_recommended_action(45) == RecommendedAction.MANUAL_INTERVENTION
        assert determine_recommended_action(10) == RecommendedAction.ABORT

    def test_recovery_recommendation(self):
        result = validate_json_integrity("[]")
        assert get_recovery_recommendation(result).startswith("Data quality is acceptable")

    def test_to_dict(self):
        data = validate_json_integrity("not json").to_dict()
        assert data["errors"][0]["type"] == "json_parse_error"
        assert data["summary"]["recommended_action"] == "review_required"
