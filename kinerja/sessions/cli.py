"""Sessions CLI sub-commands."""

from pathlib import Path
from typing import Optional

import typer

from kinerja.core.output import OutputFormat, format_result
from kinerja.sessions import store

app = typer.Typer(no_args_is_help=True)


@app.command(name="list")
def list_sessions():
    """List saved upload sessions, newest first."""
    from kinerja.core import get_db

    with get_db(readonly=True) as conn:
        sessions = store.list_upload_sessions(conn)

    if not sessions:
        typer.echo("No sessions saved.")
        return

    typer.echo(f"{'Session':<15} {'Uploaded':<20} {'Emp':>5} {'Comp':>5}  Name")
    for s in sessions:
        typer.echo(
            f"{s['session_id']:<15} {s['upload_timestamp'][:19]:<20} "
            f"{s['actual_employee_count']:>5} {s['actual_competency_count']:>5}  {s['session_name']}"
        )


@app.command()
def show(
    session_id: str = typer.Argument(..., help="Session id"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Show a session and its employees."""
    from kinerja.core import get_db

    with get_db(readonly=True) as conn:
        session = store.get_upload_session(conn, session_id)
        if session is None:
            typer.echo(f"Session not found: {session_id}", err=True)
            raise typer.Exit(code=1)
        employees = store.get_session_employees(conn, session_id)
        leadership = store.get_leadership_scores(conn, session_id)

    session["employees"] = [
        {"name": e["name"], "organizational_level": e["organizational_level"],
         "competencies": len(e["performance"])}
        for e in employees
    ]
    session["leadership_scores"] = leadership
    typer.echo(format_result(session, fmt, title=f"Session {session_id}"))


@app.command()
def delete(
    session_id: str = typer.Argument(..., help="Session id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a session and its scores."""
    from kinerja.core import get_db

    if not yes:
        typer.confirm(f"Delete session {session_id}?", abort=True)

    with get_db() as conn:
        deleted = store.delete_upload_session(conn, session_id)

    if not deleted:
        typer.echo(f"Session not found: {session_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted session {session_id}")


@app.command()
def leadership(
    session_id: str = typer.Argument(..., help="Session id"),
    employee: str = typer.Argument(..., help="Employee name"),
    score: float = typer.Argument(..., help="Leadership score (0-100)"),
):
    """Set the manual leadership score for an employee."""
    from kinerja.core import get_db

    with get_db() as conn:
        try:
            store.set_leadership_score(conn, session_id, employee, score)
        except ValueError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)

    typer.echo(f"Leadership score for {employee} set to {score:g}")


@app.command()
def recap(
    session_id: str = typer.Argument(..., help="Session id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write recaps to CSV"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Compute recaps for a saved session using its leadership scores."""
    from kinerja.cli.main import render_recaps
    from kinerja.core import get_db
    from kinerja.imports.export import recaps_to_csv
    from kinerja.scoring.recap import generate_all_employee_recaps

    with get_db(readonly=True) as conn:
        if store.get_upload_session(conn, session_id) is None:
            typer.echo(f"Session not found: {session_id}", err=True)
            raise typer.Exit(code=1)
        employees = store.get_session_employees(conn, session_id)
        manual_scores = store.get_leadership_scores(conn, session_id)

    recaps = generate_all_employee_recaps(employees, manual_scores)
    typer.echo(render_recaps(recaps, fmt))
    if output:
        recaps_to_csv(recaps, output)
        typer.echo(f"Exported {len(recaps)} recaps to {output}")
