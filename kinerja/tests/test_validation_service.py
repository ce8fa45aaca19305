"""Tests for the multi-pass performance data validation service."""

import pytest

from kinerja.validation.competencies import (
    find_matching_competency,
    missing_requirements,
    normalize_competency_name,
    sanitize_competency_name,
)
from kinerja.validation.service import (
    PerformanceDataValidator,
    calculate_completeness,
    get_validation_message,
    get_validation_severity,
    grade_score_quality,
    name_key,
    nesting_depth,
    validate_performance_data,
)
from kinerja.validation.specs import (
    REQUIRED_COMPETENCIES,
    STAFF_OTHER,
    ScoreQuality,
    ValidationError,
    ValidationErrorType as E,
    ValidationLimits,
    ValidationSeverity,
    ValidationWarning,
    ValidationWarningType as W,
)


class TestCompetencyNames:
    def test_normalize(self):
        assert normalize_competency_name("  Kualitas,  Kinerja! ") == "kualitas kinerja"

    def test_sanitize_sentence_case(self):
        assert sanitize_competency_name("  KEPEMIMPINAN!! ") == "Kepemimpinan"

    def test_exact_match(self):
        req = find_matching_competency("Kualitas Kinerja")
        assert req.name == "kualitas kinerja"

    def test_alias_match(self):
        assert find_matching_competency("Leadership").name == "kepemimpinan"

    def test_no_match(self):
        assert find_matching_competency("Olahraga") is None
        assert find_matching_competency("") is None

    def test_missing_requirements(self):
        missing = missing_requirements(["kepemimpinan"])
        assert len(missing) == len(REQUIRED_COMPETENCIES) - 1


def test_valid_dataset_passes(sample_employees):
    result = validate_performance_data(sample_employees)
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    assert result.summary.total_employees == 2
    assert result.summary.valid_employees == 2
    assert result.summary.data_completeness == 100
    assert result.summary.score_quality == ScoreQuality.EXCELLENT
    assert result.summary.missing_competencies == []


def test_empty_dataset_is_critical():
    result = validate_performance_data([])
    assert not result.is_valid
    assert result.errors[0].type == E.CRITICAL_DATA
    assert get_validation_severity(result) == ValidationSeverity.CRITICAL


def test_non_list_is_critical():
    result = validate_performance_data({"name": "Siti"})
    assert result.errors_of(E.CRITICAL_DATA)
    assert result.summary.total_employees == 0


def test_duplicate_employee_names(staff_employee, employee_factory):
    twin = employee_factory("Siti Rahmawati")
    result = validate_performance_data([staff_employee, twin])
    dup = result.errors_of(E.DUPLICATE_EMPLOYEE)
    assert dup and "Siti Rahmawati" in dup[0].details


def test_missing_name(employee_factory):
    result = validate_performance_data([employee_factory("")])
    assert result.errors_of(E.MISSING_EMPLOYEE)
    assert get_validation_severity(result) == ValidationSeverity.CRITICAL


def test_too_many_employees_keeps_checking(employee_factory):
    limits = ValidationLimits(max_array_size=1)
    validator = PerformanceDataValidator(limits)
    scores = [(n, 150 if n == "Kepemimpinan" else s) for n, s in _all_scores()]
    result = validator.validate([
        employee_factory("A One", scores=scores),
        employee_factory("B Two", scores=scores),
    ])
    types = [e.type for e in result.errors]
    assert types[0] == E.ARRAY_SIZE_EXCEEDED
    assert types.count(E.INVALID_SCORE) == 2


def test_list_valued_name_is_reported(employee_factory):
    record = {"name": ["Budi"], "organizational_level": "Staff", "performance": []}
    result = validate_performance_data([record, employee_factory("Siti")])
    assert not result.is_valid
    assert result.errors_of(E.MISSING_COMPETENCY)
    assert result.summary.valid_employees == 1


class TestRepeatedEntries:
    def test_same_record_twice(self, staff_employee):
        result = validate_performance_data([staff_employee, staff_employee])
        circular = result.errors_of(E.CIRCULAR_REFERENCE)
        assert len(circular) == 1
        assert circular[0].employee_name == "Siti Rahmawati"
        assert result.errors_of(E.DUPLICATE_EMPLOYEE)

    def test_distinct_ids_are_not_repeats(self, employee_factory):
        result = validate_performance_data([
            employee_factory("Siti", id=1),
            employee_factory("Siti", id=2),
        ])
        assert not result.errors_of(E.CIRCULAR_REFERENCE)
        assert result.errors_of(E.DUPLICATE_EMPLOYEE)

    def test_self_referencing_record(self, staff_employee, eselon_employee):
        staff_employee["atasan"] = staff_employee
        result = validate_performance_data([staff_employee, eselon_employee])
        circular = result.errors_of(E.CIRCULAR_REFERENCE)
        assert [e.message for e in circular] == ["Circular reference detected in employee data"]
        assert "(10)" in circular[0].details

    def test_depth_limit_from_limits(self, employee_factory):
        emp = employee_factory("Siti", riwayat={"jabatan": {"unit": {"bidang": "Sekretariat"}}})
        shallow = PerformanceDataValidator(ValidationLimits(max_circular_reference_depth=3))
        assert shallow.validate([emp]).errors_of(E.CIRCULAR_REFERENCE)
        assert not validate_performance_data([emp]).errors_of(E.CIRCULAR_REFERENCE)

    def test_repeated_competency_names_warn_once(self, employee_factory):
        scores = _all_scores() + [("kepemimpinan", 70), ("KEPEMIMPINAN", 75)]
        result = validate_performance_data([employee_factory("Siti", scores=scores)])
        repeats = [
            w for w in result.warnings
            if w.message == "Potential circular reference in competency names"
        ]
        assert len(repeats) == 1
        assert repeats[0].type == W.QUALITY_CONCERN
        assert repeats[0].affected_count == 2
        assert "kepemimpinan" in repeats[0].details


def test_score_out_of_range(employee_factory):
    emp = employee_factory("Siti", scores=[("Kepemimpinan", 120)])
    result = validate_performance_data([emp])
    messages = [e.message for e in result.errors_of(E.INVALID_SCORE)]
    assert "Score out of valid range" in messages


def test_non_numeric_score(employee_factory):
    emp = employee_factory("Siti", scores=[("Kepemimpinan", "tinggi")])
    result = validate_performance_data([emp])
    assert any(e.message == "Invalid score value" for e in result.errors)


def test_low_score_warns(employee_factory):
    scores = [(n, 50 if n == "Kepemimpinan" else s) for n, s in _all_scores()]
    result = validate_performance_data([employee_factory("Siti", scores=scores)])
    assert result.is_valid
    low = result.warnings_of(W.QUALITY_CONCERN)
    assert low[0].competency_name == "Kepemimpinan"


def test_sanitizes_names_in_place(employee_factory):
    scores = [("KEPEMIMPINAN!!" if n == "Kepemimpinan" else n, s) for n, s in _all_scores()]
    emp = employee_factory("Siti", scores=scores)
    result = validate_performance_data([emp])
    assert result.warnings_of(W.COMPETENCY_SANITIZED)
    assert "Kepemimpinan" in [p["name"] for p in emp["performance"]]


def test_merges_duplicate_competencies(employee_factory):
    scores = _all_scores() + [("kepemimpinan", 70)]
    emp = employee_factory("Siti", scores=scores)
    result = validate_performance_data([emp])

    merged = result.warnings_of(W.COMPETENCY_MERGED)
    assert merged and merged[0].affected_count == 2
    leadership = [p for p in emp["performance"] if p["name"].lower() == "kepemimpinan"]
    assert leadership == [{"name": "Kepemimpinan", "score": 80.0}]


def test_missing_few_competencies_warns(employee_factory):
    emp = employee_factory("Siti", scores=_all_scores()[:7])
    full = employee_factory("Budi")
    result = validate_performance_data([emp, full])
    assert result.is_valid
    partial = result.warnings_of(W.PARTIAL_DATA)
    assert partial[0].employee_name == "Siti"


def test_missing_many_competencies_errors(employee_factory):
    emp = employee_factory("Siti", scores=_all_scores()[:4])
    result = validate_performance_data([emp, employee_factory("Budi")])
    critical = [e for e in result.errors if e.message == "Employee missing critical competencies"]
    assert critical[0].affected_count == 4


def test_dataset_missing_competency(employee_factory):
    emp = employee_factory("Siti", scores=_all_scores()[:7])
    result = validate_performance_data([emp])
    assert any(
        e.message == "Required competencies missing from dataset"
        for e in result.errors_of(E.MISSING_COMPETENCY)
    )


def test_no_performance_data(employee_factory):
    emp = employee_factory("Siti")
    emp["performance"] = []
    result = validate_performance_data([emp, employee_factory("Budi")])
    assert any(e.message == "Employee has no performance data" for e in result.errors)


def test_default_org_level_warnings(employee_factory):
    employees = [
        employee_factory("Siti", organizational_level=STAFF_OTHER),
        employee_factory("Budi", organizational_level=STAFF_OTHER),
        employee_factory("Rina", organizational_level=""),
    ]
    result = validate_performance_data(employees)
    assert result.warnings_of(W.ORG_LEVEL_DEFAULT)
    assert any(
        w.message == "High number of employees with default organizational level"
        for w in result.warnings
    )


class TestSummaryHelpers:
    def test_completeness_capped(self, employee_factory):
        scores = _all_scores() + [("Olahraga", 80), ("Kreativitas", 80)]
        assert calculate_completeness([employee_factory("Siti", scores=scores)]) == 100

    def test_completeness_empty(self):
        assert calculate_completeness([]) == 0.0

    def test_completeness_counts_numeric_scores(self, employee_factory):
        scores = [(n, "tinggi" if n == "Kepemimpinan" else s) for n, s in _all_scores()]
        assert calculate_completeness([employee_factory("Siti", scores=scores)]) == 87.5

    def test_name_key(self):
        assert name_key(None) == ""
        assert name_key(["Budi"]) == "['Budi']"
        assert name_key(7) == "7"

    def test_nesting_depth(self):
        assert nesting_depth("x", 10) == 0
        assert nesting_depth({"a": [{"b": 1}]}, 10) == 3
        loop = {}
        loop["self"] = loop
        assert nesting_depth(loop, 4) == 5

    def test_grade_score_quality(self):
        assert grade_score_quality(95, 0) == ScoreQuality.EXCELLENT
        assert grade_score_quality(85, 2) == ScoreQuality.GOOD
        assert grade_score_quality(75, 5) == ScoreQuality.FAIR
        assert grade_score_quality(95, 6) == ScoreQuality.POOR


class TestMessages:
    def test_success(self, sample_employees):
        result = validate_performance_data(sample_employees)
        assert get_validation_severity(result) == ValidationSeverity.SUCCESS
        assert get_validation_message(result) == (
            "Data validation passed! 2 employees with 100% completeness."
        )

    def test_warning(self, employee_factory):
        result = validate_performance_data(
            [employee_factory("Siti", organizational_level="")]
        )
        assert get_validation_severity(result) == ValidationSeverity.WARNING
        assert get_validation_message(result).startswith("Data imported with")

    def test_error(self, employee_factory):
        result = validate_performance_data(
            [employee_factory("Siti", scores=[("Kepemimpinan", 150)])]
        )
        assert get_validation_severity(result) == ValidationSeverity.ERROR
        assert "failed with" in get_validation_message(result)

    def test_to_dict(self, sample_employees):
        data = validate_performance_data(sample_employees).to_dict()
        assert data["is_valid"] is True
        assert data["summary"]["score_quality"] == "excellent"


def _all_scores():
    return [
        ("Inisiatif dan fleksibilitas", 80),
        ("Kehadiran dan ketepatan waktu", 85),
        ("Kerjasama dan team work", 75),
        ("Manajemen waktu kerja", 80),
        ("Kepemimpinan", 90),
        ("Kualitas kinerja", 85),
        ("Kemampuan berkomunikasi", 75),
        ("Pemahaman tentang permasalahan sosial", 70),
    ]


class TestIssueTypes:
    def test_error_requires_type(self):
        error = ValidationError(E.INVALID_SCORE, "Invalid score value", employee_name="Siti")
        assert error.to_dict() == {
            "type": "invalid_score",
            "message": "Invalid score value",
            "employee_name": "Siti",
        }
        with pytest.raises(TypeError):
            ValidationError(message="Invalid score value")

    def test_warning_requires_type(self):
        warning = ValidationWarning(W.PARTIAL_DATA, "Employee missing some competencies")
        assert warning.to_dict()["type"] == "partial_data"
        with pytest.raises(TypeError):
            ValidationWarning(message="Employee missing some competencies")
