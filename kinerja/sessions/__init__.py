"""
Upload sessions: saved performance periods and manual leadership scores.

Usage:
    from kinerja.core import get_db
    from kinerja.sessions import save_upload_session
    with get_db() as conn:
        session_id = save_upload_session(conn, employees, "Semester 1")
"""

from kinerja.sessions.store import (
    delete_upload_session,
    get_leadership_scores,
    get_session_employees,
    get_upload_session,
    list_upload_sessions,
    save_upload_session,
    set_leadership_score,
)

__all__ = [
    "delete_upload_session",
    "get_leadership_scores",
    "get_session_employees",
    "get_upload_session",
    "list_upload_sessions",
    "save_upload_session",
    "set_leadership_score",
]
