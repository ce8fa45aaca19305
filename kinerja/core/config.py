"""
Configuration management for Kinerja.

Loads config.yaml and provides type-safe access to settings.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

# Config file lives alongside the kinerja package modules
_PACKAGE_DIR = Path(__file__).parent.parent.resolve()
CONFIG_PATH = _PACKAGE_DIR / "config.yaml"

_config_cache: Optional[Dict[str, Any]] = None


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Load configuration from config.yaml.

    Args:
        reload: Force reload even if cached

    Returns:
        Configuration dictionary
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def get_config_value(*keys: str, default: Any = None) -> Any:
    """
    Get a nested config value safely.

    Args:
        *keys: Path of keys to traverse (e.g., 'validation', 'limits')
        default: Value to return if key not found

    Example:
        threshold = get_config_value('validation', 'low_score_threshold', default=60)
    """
    config = get_config()

    for key in keys:
        if isinstance(config, dict) and key in config:
            config = config[key]
        else:
            return default

    return config


class KinerjaPaths:
    """
    Centralized path access.

    Usage:
        from kinerja.core.config import KINERJA_PATHS
        db = KINERJA_PATHS.database
    """

    def __init__(self):
        self._config = None

    def _ensure_config(self):
        if self._config is None:
            self._config = get_config()

    def _resolve(self, raw: str) -> Path:
        path = Path(raw)
        if not path.is_absolute():
            path = _PACKAGE_DIR / path
        return path

    @property
    def database(self) -> Path:
        self._ensure_config()
        return self._resolve(
            self._config.get("destinations", {}).get("database", "data/kinerja.db")
        )

    @property
    def exports(self) -> Path:
        self._ensure_config()
        return self._resolve(
            self._config.get("destinations", {}).get("exports", "data/exports")
        )

    @property
    def config_dir(self) -> Path:
        return _PACKAGE_DIR


KINERJA_PATHS = KinerjaPaths()
