"""
Shared test fixtures for Kinerja.

Provides an in-memory database with all schemas, a CLI runner, and
employee record fixtures covering the eight required competencies.
"""

import sqlite3
import pytest
from pathlib import Path
from unittest.mock import patch
from contextlib import contextmanager

from kinerja.core.db import SCHEMA_ORDER


COMPETENCY_SCORES = [
    ("Inisiatif dan fleksibilitas", 80),
    ("Kehadiran dan ketepatan waktu", 85),
    ("Kerjasama dan team work", 75),
    ("Manajemen waktu kerja", 80),
    ("Kepemimpinan", 90),
    ("Kualitas kinerja", 85),
    ("Kemampuan berkomunikasi", 75),
    ("Pemahaman tentang permasalahan sosial", 70),
]


def make_employee(name, organizational_level="Staff", position="Analis Data",
                  scores=None, **fields):
    record = {
        "name": name,
        "nip": fields.pop("nip", "198501012010011001"),
        "gol": fields.pop("gol", "III/a"),
        "pangkat": fields.pop("pangkat", "Penata Muda"),
        "position": position,
        "sub_position": fields.pop("sub_position", "Sekretariat"),
        "organizational_level": organizational_level,
        "performance": [
            {"name": n, "score": s} for n, s in (scores or COMPETENCY_SCORES)
        ],
    }
    record.update(fields)
    return record


@pytest.fixture
def memory_db():
    """Provide an in-memory SQLite database with ALL schemas applied in FK order."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row

    schema_dir = Path(__file__).parent.parent
    for module in SCHEMA_ORDER:
        schema_file = schema_dir / module / "schema.sql"
        if schema_file.exists():
            conn.executescript(schema_file.read_text(encoding="utf-8"))

    yield conn
    conn.close()


@pytest.fixture
def mock_db(memory_db):
    """Patch get_db everywhere to return the in-memory database."""

    @contextmanager
    def _get_db(readonly=False):
        yield memory_db

    with patch("kinerja.core.db.get_db", _get_db), \
         patch("kinerja.core.get_db", _get_db):
        yield memory_db


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def employee_factory():
    """Build employee records; scores default to all eight competencies."""
    return make_employee


@pytest.fixture
def staff_employee():
    return make_employee("Siti Rahmawati", nip="199002022015022002")


@pytest.fixture
def eselon_employee():
    return make_employee(
        "Budi Santoso", organizational_level="Eselon III",
        position="Kepala Bidang", nip="197503032000031003", gol="IV/a",
    )


@pytest.fixture
def sample_employees(staff_employee, eselon_employee):
    """Two complete, valid employee records."""
    return [staff_employee, eselon_employee]
