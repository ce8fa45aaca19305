"""Tests for the kinerja CLI and the sessions sub-commands."""

import copy
import json
import re

import pytest

from kinerja.cli.main import analyze_quality_detailed, app, parse_leadership_options


@pytest.fixture
def data_file(tmp_path, sample_employees):
    path = tmp_path / "penilaian.json"
    path.write_text(json.dumps(sample_employees), encoding="utf-8")
    return path


@pytest.fixture
def invalid_file(tmp_path, employee_factory):
    path = tmp_path / "rusak.json"
    employees = [employee_factory("Siti", scores=[("Kepemimpinan", 150)])]
    path.write_text(json.dumps(employees), encoding="utf-8")
    return path


def _session_id(output):
    match = re.search(r"Saved session (\d+)", output)
    assert match, output
    return match.group(1)


# ---------------------------------------------------------------------------
# Top-level commands
# ---------------------------------------------------------------------------

def test_help(cli_runner):
    result = cli_runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("validate", "integrity", "quality", "recap", "import", "sessions"):
        assert command in result.output


def test_no_args_shows_usage(cli_runner):
    result = cli_runner.invoke(app, [])
    assert "Usage" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "kinerja 0.1.0" in result.output


def test_unknown_command(cli_runner):
    result = cli_runner.invoke(app, ["bogus"])
    assert result.exit_code != 0


def test_migrate(cli_runner, mock_db):
    result = cli_runner.invoke(app, ["migrate"])
    assert result.exit_code == 0
    assert "Database migration complete." in result.output


def test_missing_file(cli_runner, tmp_path):
    result = cli_runner.invoke(app, ["validate", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


class TestValidate:
    def test_passes(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["validate", str(data_file)])
        assert result.exit_code == 0
        assert "Data validation passed! 2 employees with 100% completeness." in result.output

    def test_json_format(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["validate", str(data_file), "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["is_valid"] is True
        assert data["summary"]["total_employees"] == 2

    def test_fails_on_invalid_data(self, cli_runner, invalid_file):
        result = cli_runner.invoke(app, ["validate", str(invalid_file)])
        assert result.exit_code == 1
        assert "Data validation failed" in result.output


class TestIntegrity:
    def test_report(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["integrity", str(data_file)])
        assert result.exit_code == 0
        assert result.output.startswith("=== Data Integrity Report ===")
        assert "Data quality is excellent. Safe to proceed." in result.output

    def test_broken_json_without_fix(self, cli_runner, tmp_path, staff_employee):
        path = tmp_path / "rusak.json"
        path.write_text(json.dumps([staff_employee])[:-1] + ",]", encoding="utf-8")

        assert cli_runner.invoke(app, ["integrity", str(path)]).exit_code == 0
        result = cli_runner.invoke(app, ["integrity", str(path), "--no-fix"])
        assert result.exit_code == 1
        assert "recovery is disabled" in result.output


class TestQuality:
    def test_badge(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["quality", str(data_file)])
        assert result.exit_code == 0
        assert "Excellent: All data complete, calculations fully reliable" in result.output

    def test_detailed(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["quality", str(data_file), "--detailed"])
        assert result.exit_code == 0
        assert "Quality Analysis" in result.output

    def test_detailed_leaves_records_untouched(self, employee_factory):
        emp = employee_factory(
            "Siti Rahmawati", scores=[("KEPEMIMPINAN!!", 80), ("Kualitas kinerja", 85)]
        )
        emp["name"] = "  Siti Rahmawati  "
        before = copy.deepcopy(emp)
        analyze_quality_detailed([emp])
        assert emp == before


class TestRecap:
    def test_table(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["recap", str(data_file)])
        assert result.exit_code == 0
        assert "Nama" in result.output
        assert "Predikat" in result.output
        assert "73.45" in result.output
        assert "75.00" in result.output

    def test_leadership_option(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["recap", str(data_file), "-l", "Budi Santoso=90"])
        assert result.exit_code == 0
        assert "77.00" in result.output

    def test_bad_leadership_option(self, cli_runner, data_file):
        result = cli_runner.invoke(app, ["recap", str(data_file), "-l", "Budi Santoso"])
        assert result.exit_code == 2

    def test_export(self, cli_runner, data_file, tmp_path):
        out = tmp_path / "rekap.csv"
        result = cli_runner.invoke(app, ["recap", str(data_file), "-o", str(out)])
        assert result.exit_code == 0
        assert "Exported 2 recaps" in result.output
        assert out.read_text(encoding="utf-8").startswith("No,Nama")

    def test_parse_leadership_options(self):
        assert parse_leadership_options(["Budi=90", "Siti Rahma = 85.5"]) == {
            "Budi": 90.0, "Siti Rahma": 85.5,
        }
        assert parse_leadership_options(None) == {}


# ---------------------------------------------------------------------------
# Import and sessions
# ---------------------------------------------------------------------------

class TestImportAndSessions:
    def test_round_trip(self, cli_runner, mock_db, data_file):
        result = cli_runner.invoke(app, ["import", str(data_file), "--name", "Semester 1"])
        assert result.exit_code == 0
        assert "(2 employees)" in result.output
        session_id = _session_id(result.output)

        result = cli_runner.invoke(app, ["sessions", "list"])
        assert session_id in result.output
        assert "Semester 1" in result.output

        result = cli_runner.invoke(app, ["sessions", "show", session_id, "-f", "json"])
        assert result.exit_code == 0
        shown = json.loads(result.output)
        assert shown["employee_count"] == 2
        assert [e["name"] for e in shown["employees"]] == ["Budi Santoso", "Siti Rahmawati"]

        result = cli_runner.invoke(
            app, ["sessions", "leadership", session_id, "Budi Santoso", "90"]
        )
        assert result.exit_code == 0
        assert "Leadership score for Budi Santoso set to 90" in result.output

        result = cli_runner.invoke(app, ["sessions", "recap", session_id])
        assert result.exit_code == 0
        assert "77.00" in result.output

        result = cli_runner.invoke(app, ["sessions", "delete", session_id, "-y"])
        assert result.exit_code == 0
        assert f"Deleted session {session_id}" in result.output

        result = cli_runner.invoke(app, ["sessions", "list"])
        assert "No sessions saved." in result.output

    def test_refuses_invalid_data(self, cli_runner, mock_db, invalid_file):
        result = cli_runner.invoke(app, ["import", str(invalid_file)])
        assert result.exit_code == 1
        assert "Nothing saved" in result.output
        assert mock_db.execute("SELECT COUNT(*) FROM upload_sessions").fetchone()[0] == 0

    def test_force_saves_invalid_data(self, cli_runner, mock_db, invalid_file):
        result = cli_runner.invoke(app, ["import", str(invalid_file), "--force"])
        assert result.exit_code == 0
        assert mock_db.execute("SELECT COUNT(*) FROM upload_sessions").fetchone()[0] == 1

    def test_roster(self, cli_runner, mock_db, data_file, tmp_path):
        roster = tmp_path / "pegawai.csv"
        roster.write_text(
            "Nama,NIP,Level Organisasi\nBudi Santoso,197503032000031003,Eselon III\n",
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["import", str(data_file), "-r", str(roster)])
        assert result.exit_code == 0
        assert "Roster matched 1 of 2 employees" in result.output

    def test_unknown_session(self, cli_runner, mock_db):
        result = cli_runner.invoke(app, ["sessions", "show", "123"])
        assert result.exit_code == 1
        assert "Session not found: 123" in result.output

        result = cli_runner.invoke(app, ["sessions", "leadership", "123", "Budi", "90"])
        assert result.exit_code == 1
        assert "Error: Session not found" in result.output

    def test_leadership_out_of_range(self, cli_runner, mock_db, data_file):
        session_id = _session_id(cli_runner.invoke(app, ["import", str(data_file)]).output)
        result = cli_runner.invoke(
            app, ["sessions", "leadership", session_id, "Budi Santoso", "150"]
        )
        assert result.exit_code == 1
        assert "between 0 and 100" in result.output
