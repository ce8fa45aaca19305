"""
Upload session storage.

Each saved upload becomes a session holding normalized performance rows
(employee x competency x session). Employees are upserted by (name, nip)
and competencies by name, so repeated uploads share master records.
"""

import math
import sqlite3
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from kinerja.core.logging import get_logger

logger = get_logger("kinerja.sessions")

PROFILE_FIELDS = ["gol", "pangkat", "position", "sub_position", "organizational_level"]


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def generate_session_id(conn: sqlite3.Connection) -> str:
    """Millisecond timestamp id, bumped until unused."""
    stamp = int(time.time() * 1000)
    while conn.execute(
        "SELECT 1 FROM upload_sessions WHERE session_id = ?", (str(stamp),)
    ).fetchone():
        stamp += 1
    return str(stamp)


# ---------------------------------------------------------------------------
# Master records
# ---------------------------------------------------------------------------

def upsert_employee(conn: sqlite3.Connection, employee: Dict[str, Any]) -> int:
    """Insert or refresh an employee by (name, nip). Returns the row id."""
    name = _text(employee.get("name"))
    nip = _text(employee.get("nip"))
    conn.execute(
        """INSERT INTO employees (name, nip, gol, pangkat, position, sub_position,
                                  organizational_level)
           VALUES (?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(name, nip) DO UPDATE SET
               gol = excluded.gol,
               pangkat = excluded.pangkat,
               position = excluded.position,
               sub_position = excluded.sub_position,
               organizational_level = excluded.organizational_level,
               updated_at = CURRENT_TIMESTAMP""",
        (name, nip, *[_text(employee.get(f)) for f in PROFILE_FIELDS]),
    )
    row = conn.execute(
        "SELECT id FROM employees WHERE name = ? AND nip = ?", (name, nip)
    ).fetchone()
    return row["id"]


def get_competency_by_name(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM competencies WHERE LOWER(name) = LOWER(?)", (name,)
    ).fetchone()
    return dict(row) if row else None


def upsert_competency(
    conn: sqlite3.Connection, name: str, category: Optional[str] = None, weight: float = 1.0
) -> int:
    existing = get_competency_by_name(conn, name)
    if existing:
        return existing["id"]
    cur = conn.execute(
        "INSERT INTO competencies (name, category, weight) VALUES (?, ?, ?)",
        (name, category, weight),
    )
    return cur.lastrowid


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def save_upload_session(
    conn: sqlite3.Connection,
    employees: List[Dict[str, Any]],
    session_name: Optional[str] = None,
) -> str:
    """Store employees and their scores as a new session. Returns session id.

    Records without a name and scores that are not numbers are skipped.
    Everything is written in one transaction.
    """
    session_id = generate_session_id(conn)
    now = datetime.now(timezone.utc)
    name = session_name or f"Upload {now.strftime('%Y-%m-%d %H:%M:%S')}"

    competency_ids = set()
    saved = 0
    try:
        conn.execute(
            "INSERT INTO upload_sessions (session_id, session_name, upload_timestamp) "
            "VALUES (?, ?, ?)",
            (session_id, name, now.isoformat()),
        )
        for employee in employees:
            if not isinstance(employee, dict) or not _text(employee.get("name")):
                continue
            employee_id = upsert_employee(conn, employee)
            saved += 1
            for perf in employee.get("performance") or []:
                if not isinstance(perf, dict) or not _text(perf.get("name")):
                    continue
                score = perf.get("score")
                if isinstance(score, bool) or not isinstance(score, (int, float)):
                    continue
                if math.isnan(score):
                    continue
                competency_id = upsert_competency(conn, _text(perf["name"]))
                competency_ids.add(competency_id)
                conn.execute(
                    """INSERT OR REPLACE INTO employee_performance
                       (employee_id, competency_id, session_id, score, raw_score)
                       VALUES (?, ?, ?, ?, ?)""",
                    (employee_id, competency_id, session_id, score, score),
                )
        conn.execute(
            "UPDATE upload_sessions SET employee_count = ?, competency_count = ? "
            "WHERE session_id = ?",
            (saved, len(competency_ids), session_id),
        )
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise

    logger.info("Saved session %s (%s): %d employees", session_id, name, saved)
    return session_id


def list_upload_sessions(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    """All sessions, newest first, with counts taken from the stored rows."""
    rows = conn.execute(
        """SELECT us.*,
                  COUNT(DISTINCT ep.employee_id) AS actual_employee_count,
                  COUNT(DISTINCT ep.competency_id) AS actual_competency_count
           FROM upload_sessions us
           LEFT JOIN employee_performance ep ON us.session_id = ep.session_id
           GROUP BY us.session_id
           ORDER BY us.upload_timestamp DESC, us.session_id DESC"""
    ).fetchall()
    return [dict(r) for r in rows]


def get_upload_session(conn: sqlite3.Connection, session_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM upload_sessions WHERE session_id = ?", (session_id,)
    ).fetchone()
    return dict(row) if row else None


def get_session_employees(conn: sqlite3.Connection, session_id: str) -> List[Dict[str, Any]]:
    """Rebuild employee records (with performance lists) for a session."""
    rows = conn.execute(
        """SELECT e.id, e.name, e.nip, e.gol, e.pangkat, e.position, e.sub_position,
                  e.organizational_level, c.name AS competency, ep.score
           FROM employee_performance ep
           JOIN employees e ON e.id = ep.employee_id
           JOIN competencies c ON c.id = ep.competency_id
           WHERE ep.session_id = ?
           ORDER BY e.name, ep.id""",
        (session_id,),
    ).fetchall()

    employees: Dict[int, Dict[str, Any]] = {}
    for r in rows:
        emp = employees.get(r["id"])
        if emp is None:
            emp = {
                "name": r["name"],
                "nip": r["nip"],
                **{f: r[f] or "" for f in PROFILE_FIELDS},
                "performance": [],
            }
            employees[r["id"]] = emp
        emp["performance"].append({"name": r["competency"], "score": r["score"]})
    return list(employees.values())


def delete_upload_session(conn: sqlite3.Connection, session_id: str) -> bool:
    """Delete a session with its scores. Returns False if it did not exist."""
    conn.execute("DELETE FROM employee_performance WHERE session_id = ?", (session_id,))
    conn.execute("DELETE FROM manual_leadership_scores WHERE session_id = ?", (session_id,))
    cur = conn.execute("DELETE FROM upload_sessions WHERE session_id = ?", (session_id,))
    conn.commit()
    deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted session %s", session_id)
    return deleted


# ---------------------------------------------------------------------------
# Leadership scores
# ---------------------------------------------------------------------------

def set_leadership_score(
    conn: sqlite3.Connection, session_id: str, employee_name: str, score: float
) -> None:
    """Record the manual leadership (penilaian pimpinan) score for an employee.

    Raises:
        ValueError: score outside 0..100 or unknown session.
    """
    if not 0 <= score <= 100:
        raise ValueError(f"Leadership score must be between 0 and 100, got {score}")
    if get_upload_session(conn, session_id) is None:
        raise ValueError(f"Session not found: {session_id}")
    conn.execute(
        """INSERT INTO manual_leadership_scores (session_id, employee_name, score)
           VALUES (?, ?, ?)
           ON CONFLICT(session_id, employee_name) DO UPDATE SET
               score = excluded.score,
               updated_at = CURRENT_TIMESTAMP""",
        (session_id, employee_name, score),
    )
    conn.commit()


def get_leadership_scores(conn: sqlite3.Connection, session_id: str) -> Dict[str, float]:
    rows = conn.execute(
        "SELECT employee_name, score FROM manual_leadership_scores WHERE session_id = ?",
        (session_id,),
    ).fetchall()
    return {r["employee_name"]: r["score"] for r in rows}


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def get_competency_averages(
    conn: sqlite3.Connection, session_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    where = "WHERE ep.session_id = ?" if session_id else ""
    params = (session_id,) if session_id else ()
    rows = conn.execute(
        f"""SELECT c.name,
                   AVG(ep.score) AS avg_score,
                   MIN(ep.score) AS min_score,
                   MAX(ep.score) AS max_score,
                   COUNT(*) AS employee_count
            FROM competencies c
            JOIN employee_performance ep ON c.id = ep.competency_id
            {where}
            GROUP BY c.id, c.name
            ORDER BY avg_score DESC""",
        params,
    ).fetchall()
    return [dict(r) for r in rows]


def get_database_stats(conn: sqlite3.Connection) -> Dict[str, int]:
    def _count(table: str) -> int:
        return conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]

    return {
        "employees": _count("employees"),
        "competencies": _count("competencies"),
        "performance_records": _count("employee_performance"),
        "sessions": _count("upload_sessions"),
    }
