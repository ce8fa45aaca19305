"""Tests for the composable employee, score and competency validators."""

from kinerja.validation.specs import (
    ValidationErrorType as E,
    ValidationLimits,
    ValidationWarningType as W,
)
from kinerja.validators import (
    CompetencyValidator,
    EmployeeValidator,
    ScoreValidator,
    ValidationOptions,
    create_validator_orchestrator,
    validate_all,
    validate_employees_only,
)
from kinerja.validators.competency import (
    normalize_competency_name,
    prettify_competency_name,
    sanitize_competency_name,
)


class TestEmployeeValidator:
    def test_valid_structure(self, sample_employees):
        errors, warnings = EmployeeValidator().validate_employee_structure(sample_employees)
        assert errors == []
        assert warnings == []

    def test_not_a_list(self):
        errors, _ = EmployeeValidator().validate_employee_structure({"name": "Siti"})
        assert errors[0].message == "Employee data must be an array"
        assert "dict" in errors[0].details

    def test_empty(self):
        errors, warnings = EmployeeValidator().validate_employee_structure([])
        assert errors[0].type == E.CRITICAL_DATA
        assert warnings[0].type == W.PARTIAL_DATA

    def test_max_employees(self, employee_factory):
        validator = EmployeeValidator(ValidationLimits(max_employees=1))
        errors, _ = validator.validate_employee_structure(
            [employee_factory("Siti"), employee_factory("Budi")]
        )
        assert errors[0].type == E.ARRAY_SIZE_EXCEEDED

    def test_duplicates_ignore_case(self, employee_factory):
        errors, _ = EmployeeValidator().validate_employee_structure(
            [employee_factory("Siti"), employee_factory(" SITI ")]
        )
        assert errors[0].type == E.DUPLICATE_EMPLOYEE

    def test_missing_required_fields(self, employee_factory):
        errors, _ = EmployeeValidator().validate_employee_structure(
            [employee_factory("Siti", organizational_level=""), "junk"]
        )
        messages = [e.message for e in errors]
        assert "Missing required employee fields: organizational_level" in messages
        assert "Employee record at index 1 is not an object" in messages
        assert errors[-1].type == E.MISSING_EMPLOYEE

    def test_name_checks(self):
        assert EmployeeValidator.validate_employee_name("Siti Rahmawati") == (True, None)
        assert EmployeeValidator.validate_employee_name("S")[0] is False
        assert EmployeeValidator.validate_employee_name("x" * 101)[0] is False
        assert EmployeeValidator.validate_employee_name("<Siti>") == (
            False, "Employee name contains invalid characters"
        )
        assert EmployeeValidator.validate_employee_name(None)[0] is False

    def test_org_level_checks(self):
        assert EmployeeValidator.validate_organizational_level("Eselon III") == (True, None)
        assert EmployeeValidator.validate_organizational_level("Kasubbid Umum")[0]
        ok, error = EmployeeValidator.validate_organizational_level("Direktur")
        assert not ok and "Direktur" in error


class TestScoreValidator:
    def test_single_score(self):
        assert ScoreValidator.validate_single_score(75).is_valid
        assert ScoreValidator.validate_single_score(True).error == "Score must be a number"
        assert ScoreValidator.validate_single_score(float("inf")).normalized_score is None
        low = ScoreValidator.validate_single_score(-5)
        assert not low.is_valid and low.normalized_score == 0
        high = ScoreValidator.validate_single_score(120)
        assert not high.is_valid and high.normalized_score == 100

    def test_out_of_range_gives_error_and_warning(self, employee_factory):
        emp = employee_factory("Siti", scores=[("Kepemimpinan", 120)])
        errors, warnings = ScoreValidator().validate_performance_scores([emp])
        assert errors[0].type == E.INVALID_SCORE
        assert warnings[0].type == W.SCORE_NORMALIZATION
        assert warnings[0].details == "120 -> 100"

    def test_entry_problems(self, employee_factory):
        emp = employee_factory("Siti")
        emp["performance"] = ["bad", {"score": 80}, {"name": "Kepemimpinan"}]
        errors, _ = ScoreValidator().validate_performance_scores([emp])
        assert [e.message for e in errors] == [
            "Performance entry at index 0 is not an object",
            "Performance entry at index 1 has no competency name",
            "Missing score",
        ]

    def test_missing_performance_warns(self, employee_factory):
        emp = employee_factory("Siti")
        emp["performance"] = None
        errors, warnings = ScoreValidator().validate_performance_scores([emp])
        assert errors == []
        assert warnings[0].message == "Employee has no performance data"

    def test_identical_scores(self, sample_employees):
        _, warnings = ScoreValidator().validate_score_consistency(sample_employees)
        assert len(warnings) == 8
        assert all(w.message == "All employees have identical scores" for w in warnings)

    def test_low_variance(self, employee_factory):
        employees = [
            employee_factory(f"Pegawai {i}", scores=[("Kepemimpinan", 80 + i % 2)])
            for i in range(12)
        ]
        _, warnings = ScoreValidator().validate_score_consistency(employees)
        assert [w.message for w in warnings] == ["Scores show unusually low variance"]

    def test_outliers(self, employee_factory):
        scores = [80, 80, 80, 80, 80, 80, 80, 80, 80, 10]
        employees = [
            employee_factory(f"Pegawai {i}", scores=[("Kepemimpinan", s)])
            for i, s in enumerate(scores)
        ]
        _, warnings = ScoreValidator().validate_score_consistency(employees)
        outliers = [w for w in warnings if w.message == "Score outliers detected"]
        assert outliers[0].affected_count == 1


class TestCompetencyValidator:
    def test_name_helpers(self):
        assert sanitize_competency_name("  Kualitas   Kinerja!! ") == "Kualitas Kinerja"
        assert sanitize_competency_name("--Kepemimpinan--") == "Kepemimpinan"
        assert normalize_competency_name("Kualitas  Kinerja") == "kualitas kinerja"
        assert prettify_competency_name("kualitas kinerja") == "Kualitas Kinerja"

    def test_name_validation(self):
        validator = CompetencyValidator()
        assert validator.validate_competency_name(None)[1] == "Competency name is required"
        assert validator.validate_competency_name(5)[1] == "Competency name must be a string"
        assert validator.validate_competency_name("   ")[1] == "Competency name cannot be empty"
        assert validator.validate_competency_name("K")[1] == "Competency name too short"
        assert validator.validate_competency_name("K" * 101)[1] == "Competency name too long"
        assert validator.validate_competency_name("Kepemimpinan!") == (True, None, "Kepemimpinan")
        assert validator.validate_competency_name("Kepemimpinan") == (True, None, None)

    def test_required_competencies(self, employee_factory):
        emp = employee_factory("Siti", scores=[("Kepemimpinan", 80)])
        errors, _ = CompetencyValidator().validate_required_competencies([emp])
        assert errors[0].message == "Required competencies missing from dataset"
        assert errors[1].employee_name == "Siti"
        assert errors[1].affected_count == 7

    def test_duplicates_detected(self, employee_factory):
        emp = employee_factory(
            "Siti", scores=[("Kepemimpinan", 80), ("kepemimpinan!", 90)]
        )
        _, warnings = CompetencyValidator().detect_duplicate_competencies([emp])
        assert warnings[0].type == W.COMPETENCY_MERGED
        assert "kepemimpinan" in warnings[0].details

    def test_sanitize_and_merge(self):
        merged = CompetencyValidator.sanitize_and_merge_competencies([
            {"name": "Kepemimpinan", "score": 80},
            {"name": "KEPEMIMPINAN", "score": 90},
            {"name": "Kualitas kinerja", "score": "n/a"},
            {"score": 70},
            "junk",
        ])
        assert merged == [{"name": "Kepemimpinan", "score": 85.0}]

    def test_validate_competencies_merges_in_place(self, staff_employee):
        errors, _ = CompetencyValidator().validate_competencies([staff_employee])
        assert errors == []
        names = [p["name"] for p in staff_employee["performance"]]
        assert "Inisiatif Dan Fleksibilitas" in names
        assert len(names) == 8


class TestOrchestrator:
    def test_validate_all(self, sample_employees):
        result = validate_all(sample_employees)
        assert result.is_valid
        assert result.summary.error_count == 0
        assert result.summary.warning_count == 8
        assert result.summary.overall_score == 100
        assert result.summary.validation_timestamp

    def test_non_list_input(self):
        result = create_validator_orchestrator().validate_all("not a list")
        assert not result.is_valid
        assert result.errors[0].message == "Employee data must be an array"

    def test_employees_only_skips_scores(self, employee_factory):
        emp = employee_factory("Siti", scores=[("Kepemimpinan", 500)])
        result = validate_employees_only([emp])
        assert result.is_valid

    def test_selective(self, employee_factory):
        emp = employee_factory("Siti", scores=[("Kepemimpinan", 500)])
        orchestrator = create_validator_orchestrator()
        result = orchestrator.validate_selective(
            [emp], ValidationOptions(validate_employees=False, validate_competencies=False)
        )
        assert [e.type for e in result.errors] == [E.INVALID_SCORE]

    def test_get_validators(self):
        validators = create_validator_orchestrator().get_validators()
        assert set(validators) == {"employee", "score", "competency"}
