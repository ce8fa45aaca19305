"""
Database access for Kinerja.

Provides connection management, query execution, and schema migration.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from kinerja.core.config import KINERJA_PATHS
from kinerja.core.logging import get_logger
from kinerja.core.paths import ensure_directory

logger = get_logger("kinerja.migrate")


def get_db_path() -> Path:
    """Get database path from config."""
    return KINERJA_PATHS.database


@contextmanager
def get_db(readonly: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.

    Enables foreign keys and Row factory automatically.

    Args:
        readonly: Open in read-only mode (useful for queries)

    Yields:
        sqlite3.Connection with Row factory enabled
    """
    db_path = get_db_path()

    if readonly:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
    else:
        ensure_directory(db_path.parent)
        conn = sqlite3.connect(str(db_path))

    try:
        conn.execute("PRAGMA foreign_keys = ON")
        if not readonly:
            conn.execute("PRAGMA journal_mode = WAL")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def execute_query(query: str, params: tuple = (), readonly: bool = True) -> list:
    """
    Execute a query and return results as list of Row objects.

    Args:
        query: SQL query
        params: Query parameters
        readonly: Use read-only connection
    """
    with get_db(readonly=readonly) as conn:
        return conn.execute(query, params).fetchall()


# Schema dependency order, foreign keys flow downhill through this list.
SCHEMA_ORDER = [
    "sessions",
]


def migrate_all():
    """
    Run all module schemas in dependency order.

    Each module's schema.sql uses CREATE TABLE IF NOT EXISTS,
    making this safe to run repeatedly.
    """
    package_dir = Path(__file__).parent.parent

    with get_db() as conn:
        for module_name in SCHEMA_ORDER:
            schema_file = package_dir / module_name / "schema.sql"
            if schema_file.exists():
                logger.info(f"Applying schema: {module_name}/schema.sql")
                conn.executescript(schema_file.read_text(encoding="utf-8"))
            else:
                logger.debug(f"No schema for module: {module_name}")

        conn.commit()
        logger.info("All schemas applied successfully")
