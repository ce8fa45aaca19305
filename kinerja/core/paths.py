"""
Path utilities for Kinerja.
"""

from pathlib import Path
from typing import Optional

from kinerja.core.config import KINERJA_PATHS


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating if necessary. Returns path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_export_path(filename: str, directory: Optional[Path] = None) -> Path:
    """Resolve an export filename into the configured exports directory."""
    target_dir = ensure_directory(directory or KINERJA_PATHS.exports)
    return target_dir / filename
