"""
Configuration - Resolver Settings

Holds the default settings for the resolution engine and merges optional
overrides from a YAML file. The override file can be passed explicitly or
named in the FRETBOARD_CONFIG environment variable.

Usage:
    from fretboard.config import get_config

    ceiling = get_config()["fret_ceiling"]

Author: Rohan Rajendra Dhanawade
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


# =============================================================================
# DEFAULTS
# =============================================================================

DATA_DIR = Path(__file__).resolve().parent / "data"

CONFIG_ENV_VAR = "FRETBOARD_CONFIG"

RESOLVER_CONFIG = {
    # Instrument
    "fret_ceiling": 24,  # Highest fret a transposed scale may use

    # Validation
    "suspicious_relative_fret": 12,  # Relative values above this look absolute

    # Tables
    "data_dir": str(DATA_DIR),
    "chord_table": "chord_voicings.yaml",
    "generic_table": "generic_shapes.yaml",
    "scale_table": "scale_patterns.yaml",

    # Output
    "log_level": "WARNING",
    "show_progress": True,
}


# =============================================================================
# LOADING
# =============================================================================

def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Build a configuration dict from the defaults plus a YAML override file.

    Args:
        path: YAML file with overrides. Falls back to $FRETBOARD_CONFIG.

    Returns:
        A fresh dict; RESOLVER_CONFIG itself is never modified.

    Raises:
        ValueError: If the file is not a mapping or names an unknown key.
    """
    config = RESOLVER_CONFIG.copy()

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return config

    with open(path, "r", encoding="utf-8") as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(overrides).__name__}")

    unknown = sorted(set(overrides) - set(RESOLVER_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {unknown}")

    config.update(overrides)
    return config


# Explicit override file, set through set_config_path(); None means $FRETBOARD_CONFIG
_config_path: Optional[Union[str, Path]] = None


def set_config_path(path: Optional[Union[str, Path]]) -> Optional[Union[str, Path]]:
    """
    Point get_config() at a different override file.

    Returns the previous path so callers can put it back. The cached config
    is dropped; cached tables are not (see fretboard.clear_caches).
    """
    global _config_path
    previous = _config_path
    _config_path = path
    get_config.cache_clear()
    return previous


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Return the active configuration (loaded once per process)."""
    return load_config(_config_path)


def table_path(config: Dict[str, Any], table_key: str) -> Path:
    """Resolve the file path of one of the data tables."""
    return Path(config["data_dir"]) / config[table_key]
