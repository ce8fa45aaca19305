"""
Kinerja CLI - Main Entry Point

Unified Typer CLI for validating, scoring and storing performance uploads.

Usage:
    kinerja version
    kinerja migrate
    kinerja validate data.json
    kinerja integrity data.json
    kinerja quality penilaian.csv
    kinerja recap penilaian.csv --leadership "Budi=90"
    kinerja import penilaian.csv --name "Semester 1" --roster pegawai.xlsx
    kinerja sessions [command]
"""

import copy
import importlib
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

import kinerja
from kinerja.core.output import OutputFormat, format_result
from kinerja.imports.engine import load_employees, load_json_records, read_file
from kinerja.imports.export import recaps_to_csv
from kinerja.imports.roster import apply_roster, parse_roster
from kinerja.integrity.service import validate_performance_data_integrity
from kinerja.quality.analyzer import analyze_data_quality
from kinerja.quality.report import generate_data_quality_report, get_data_quality_badge
from kinerja.recovery.service import (
    EnhancedDataService,
    get_employee_data_with_integrity,
    parse_performance_data_with_integrity,
)
from kinerja.recovery.strategies import RecoveryOptions
from kinerja.scoring.recap import PerformanceRecap, generate_all_employee_recaps
from kinerja.validation.service import get_validation_message, validate_performance_data

app = typer.Typer(
    name="kinerja",
    help="Employee performance data validation, quality scoring and recaps.",
    no_args_is_help=True,
)

FORMAT_OPTION = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load(file: Path) -> List[Any]:
    """Load employee records or exit with the reason."""
    try:
        return load_employees(file)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


def parse_leadership_options(values: Optional[List[str]]) -> Dict[str, float]:
    """Turn ``["Budi=90", "Sari=85"]`` into a name -> score mapping."""
    scores: Dict[str, float] = {}
    for value in values or []:
        name, sep, raw = value.rpartition("=")
        try:
            score = float(raw)
        except ValueError:
            score = None
        if not sep or not name.strip() or score is None:
            raise typer.BadParameter(f"Expected NAME=SCORE, got '{value}'")
        scores[name.strip()] = score
    return scores


def analyze_quality_detailed(employees: List[Any]):
    """Dataset analysis backed by an integrity check run on a copy of the records."""
    integrity_result = validate_performance_data_integrity(
        [copy.deepcopy(e) for e in employees if isinstance(e, dict)]
    )
    return analyze_data_quality(employees, integrity_result)


def render_recaps(recaps: List[PerformanceRecap], fmt: OutputFormat) -> str:
    if fmt != OutputFormat.HUMAN:
        return format_result(recaps, fmt, title="Rekap Kinerja")

    lines = [
        f"{'No':>3}  {'Nama':<30} {'Tipe':<7} {'Perilaku':>8} {'Kualitas':>8} "
        f"{'Pimpinan':>8} {'Total':>6}  Predikat",
    ]
    for number, r in enumerate(recaps, start=1):
        lines.append(
            f"{number:>3}  {r.name[:30]:<30} {r.position_type:<7} {r.perilaku_kinerja:>8.2f} "
            f"{r.kualitas_kerja:>8.2f} {r.penilaian_pimpinan:>8.2f} {r.total_nilai:>6.2f}  {r.rating}"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def version():
    """Show Kinerja version."""
    typer.echo(f"kinerja {kinerja.__version__}")


@app.command()
def migrate():
    """Run database schema migrations for all modules."""
    from kinerja.core.db import migrate_all

    migrate_all()
    typer.echo("Database migration complete.")


@app.command()
def validate(
    file: Path = typer.Argument(..., help="JSON upload or CSV/XLSX performance sheet"),
    fmt: OutputFormat = FORMAT_OPTION,
):
    """Validate employee performance data."""
    employees = _load(file)
    result = validate_performance_data(employees)

    typer.echo(format_result(result, fmt, title=f"Validation: {file.name}"))
    if fmt == OutputFormat.HUMAN:
        typer.echo()
        typer.echo(get_validation_message(result))

    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command()
def integrity(
    file: Path = typer.Argument(..., help="JSON upload or CSV/XLSX performance sheet"),
    no_fix: bool = typer.Option(False, "--no-fix", help="Disable recovery and auto-fixes"),
    fmt: OutputFormat = FORMAT_OPTION,
):
    """Check data integrity, recovering damaged JSON where possible."""
    options = RecoveryOptions.from_config(auto_fix=not no_fix)

    if file.suffix.lower() == ".json":
        try:
            raw = load_json_records(file)
        except FileNotFoundError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)
        result = parse_performance_data_with_integrity(raw, options)
    else:
        result = get_employee_data_with_integrity(_load(file), options)

    if fmt == OutputFormat.HUMAN:
        typer.echo(EnhancedDataService.generate_error_report(result))
        advice = EnhancedDataService.get_recovery_options_for_user(result)
        for line in advice.recommendations:
            typer.echo(line)
    else:
        typer.echo(format_result(result, fmt, title=f"Integrity: {file.name}"))

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def quality(
    file: Path = typer.Argument(..., help="JSON upload or CSV/XLSX performance sheet"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Include metric breakdown"),
    fmt: OutputFormat = FORMAT_OPTION,
):
    """Report data quality and recap reliability."""
    employees = _load(file)
    report = generate_data_quality_report(employees)

    typer.echo(format_result(report, fmt, title=f"Data Quality: {file.name}"))
    if fmt == OutputFormat.HUMAN:
        badge = get_data_quality_badge(report.overall_quality.value)
        typer.echo()
        typer.echo(f"{badge['label']}: {badge['description']}")

    if detailed:
        analysis = analyze_quality_detailed(employees)
        typer.echo()
        typer.echo(format_result(analysis, fmt, title="Quality Analysis"))


@app.command()
def recap(
    file: Path = typer.Argument(..., help="JSON upload or CSV/XLSX performance sheet"),
    leadership: Optional[List[str]] = typer.Option(
        None, "--leadership", "-l", help="Leadership score as NAME=SCORE (repeatable)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write recaps to CSV"),
    fmt: OutputFormat = FORMAT_OPTION,
):
    """Compute performance recaps (perilaku, kualitas, pimpinan, total)."""
    manual_scores = parse_leadership_options(leadership)
    employees = _load(file)
    validate_performance_data(employees)
    recaps = generate_all_employee_recaps(employees, manual_scores)

    typer.echo(render_recaps(recaps, fmt))
    if output:
        recaps_to_csv(recaps, output)
        typer.echo(f"Exported {len(recaps)} recaps to {output}")


@app.command(name="import")
def import_file(
    file: Path = typer.Argument(..., help="JSON upload or CSV/XLSX performance sheet"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Session name"),
    roster: Optional[Path] = typer.Option(None, "--roster", "-r", help="Roster CSV/XLSX with NIP, jabatan, level"),
    force: bool = typer.Option(False, "--force", help="Save even when validation fails"),
):
    """Validate a performance upload and save it as a session."""
    from kinerja.core import get_db
    from kinerja.sessions.store import save_upload_session

    employees = _load(file)

    if roster:
        try:
            headers, rows = read_file(roster)
            matched = apply_roster(employees, parse_roster(headers, rows))
        except (FileNotFoundError, ValueError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Roster matched {matched} of {len(employees)} employees")

    result = validate_performance_data(employees)
    typer.echo(get_validation_message(result))
    if not result.is_valid and not force:
        for error in result.errors:
            typer.echo(f"  - [{error.type.value}] {error.message}", err=True)
        typer.echo("Nothing saved. Use --force to save anyway.", err=True)
        raise typer.Exit(code=1)

    with get_db() as conn:
        session_id = save_upload_session(conn, employees, name)

    typer.echo(f"Saved session {session_id} ({len(employees)} employees)")


# ---------------------------------------------------------------------------
# Module registration
# ---------------------------------------------------------------------------

def _register_modules():
    """Register module CLI sub-apps. Skips modules missing a cli.py."""
    module_registry = [
        ("kinerja.sessions.cli", "sessions", "Saved upload sessions & leadership scores"),
    ]

    for module_path, name, help_text in module_registry:
        try:
            mod = importlib.import_module(module_path)
            app.add_typer(mod.app, name=name, help=help_text)
        except (ImportError, AttributeError):
            pass


_register_modules()


def main():
    """Entry point for the kinerja CLI."""
    app()


if __name__ == "__main__":
    main()
