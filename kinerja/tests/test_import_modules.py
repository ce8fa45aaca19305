"""Smoke test: every kinerja module imports cleanly."""

import importlib

import pytest

MODULES = [
    "kinerja",
    "kinerja.core",
    "kinerja.core.config",
    "kinerja.core.db",
    "kinerja.core.logging",
    "kinerja.core.output",
    "kinerja.core.paths",
    "kinerja.validation.specs",
    "kinerja.validation.competencies",
    "kinerja.validation.service",
    "kinerja.validators.employee",
    "kinerja.validators.score",
    "kinerja.validators.competency",
    "kinerja.validators.orchestrator",
    "kinerja.quality.report",
    "kinerja.quality.analyzer",
    "kinerja.integrity.specs",
    "kinerja.integrity.rules",
    "kinerja.integrity.service",
    "kinerja.recovery.strategies",
    "kinerja.recovery.fixes",
    "kinerja.recovery.service",
    "kinerja.scoring.orglevels",
    "kinerja.scoring.ratings",
    "kinerja.scoring.recap",
    "kinerja.imports.specs",
    "kinerja.imports.engine",
    "kinerja.imports.roster",
    "kinerja.imports.export",
    "kinerja.sessions.store",
    "kinerja.sessions.cli",
    "kinerja.cli.main",
]


@pytest.mark.parametrize("module", MODULES)
def test_module_imports(module):
    importlib.import_module(module)


def test_sessions_registered():
    from kinerja.cli.main import app

    names = [group.name for group in app.registered_groups]
    assert "sessions" in names
