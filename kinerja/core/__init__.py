"""
Kinerja Core - Shared services for all modules.

Usage:
    from kinerja.core import get_db, get_config, get_logger, KINERJA_PATHS
"""

from kinerja.core.config import get_config, get_config_value, KINERJA_PATHS
from kinerja.core.db import get_db, execute_query, migrate_all
from kinerja.core.logging import get_logger

__all__ = [
    "get_config",
    "get_config_value",
    "KINERJA_PATHS",
    "get_db",
    "execute_query",
    "migrate_all",
    "get_logger",
]
