"""
Configuration constants for the grade tracker.

This module contains all configuration values and constants used throughout
the tracker. Centralizing these makes it easy to adjust behavior as
university policies change.

Runtime settings (where the official record lives) are loaded from a YAML
file and environment variables by ``load_settings``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ConfigError

# =============================================================================
# FILE PATHS
# =============================================================================

PACKAGE_DIR = Path(__file__).parent
DATA_DIR = PACKAGE_DIR / "data"
CATALOG_FILE = DATA_DIR / "catalog.json"

DEFAULT_CONFIG_FILE = "gradetrack.yaml"
DEFAULT_STORE_FILE = "gradetrack_data.json"


# =============================================================================
# GRADE DEFINITIONS
# =============================================================================

# Grade points on the 10-point scale. E, F and R still carry credits into the
# denominator; I (Incomplete) is not counted at all.
GRADE_POINTS = {
    "O": 10,
    "A+": 9,
    "A": 8,
    "B+": 7,
    "B": 6,
    "C": 5,
    "D": 4,
    "E": 0,
    "F": 0,
    "R": 0,
    "I": None,
}

# Token shown wherever a GPA is undefined
GPA_NOT_APPLICABLE = "N/A"


# =============================================================================
# ATTENDANCE POLICY
# =============================================================================

DEFAULT_ATTENDANCE_TARGET = 75

# Condonation band: below the floor nothing can be condoned, at or above the
# pass threshold nothing needs to be.
CONDONATION_FLOOR = 65
CONDONATION_PASS = 75
CONDONATION_MAX_BONUS = 10

# (minimum previous-term percentage, bonus) checked top to bottom
CONDONATION_TIERS = (
    (90, 10),
    (85, 8),
    (80, 6),
    (75, 4),
)


# =============================================================================
# CATALOG SEARCH
# =============================================================================

SEARCH_RESULT_LIMIT = 8
SEARCH_MIN_TOKEN_LENGTH = 2


# =============================================================================
# STORAGE TABLES
# =============================================================================

SEMESTERS_TABLE = "semesters"
COURSES_TABLE = "courses"
ATTENDANCE_TABLE = "attendance_profiles"


# =============================================================================
# RUNTIME SETTINGS
# =============================================================================

@dataclass
class Settings:
    """
    Where the official record lives and who is using it.

    With ``supabase_url`` set the tracker talks to the hosted database;
    otherwise it falls back to a local JSON file at ``store_file``.
    """
    user_id: str = "local-user"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    access_token: Optional[str] = None
    store_file: str = DEFAULT_STORE_FILE
    catalog_file: Optional[str] = None
    request_timeout: tuple = (5.0, 20.0)
    max_retries: int = 3

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url)


# Environment variable -> Settings field
_ENV_OVERRIDES = {
    "GRADETRACK_USER_ID": "user_id",
    "GRADETRACK_SUPABASE_URL": "supabase_url",
    "GRADETRACK_SUPABASE_KEY": "supabase_key",
    "GRADETRACK_ACCESS_TOKEN": "access_token",
    "GRADETRACK_STORE_FILE": "store_file",
    "GRADETRACK_CATALOG_FILE": "catalog_file",
}


def _parse_timeout(value) -> tuple:
    """Accept ``[connect, read]`` or a single read timeout."""
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    if isinstance(value, (int, float)):
        return (5.0, float(value))
    raise ConfigError(f"Invalid request_timeout: {value!r}")


def load_settings(config_file: Optional[str] = None, environ=None) -> Settings:
    """
    Load settings from a YAML file, then apply environment overrides.

    A missing default config file is fine (defaults are used); a missing
    file that was asked for explicitly is a ConfigError.
    """
    environ = os.environ if environ is None else environ
    raw = {}

    path = Path(config_file or DEFAULT_CONFIG_FILE)
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse config file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
    elif config_file:
        raise ConfigError(f"Config file {path} does not exist")

    settings = Settings()
    for key in ("user_id", "supabase_url", "supabase_key", "access_token",
                "store_file", "catalog_file"):
        if raw.get(key) is not None:
            setattr(settings, key, str(raw[key]))
    if raw.get("request_timeout") is not None:
        settings.request_timeout = _parse_timeout(raw["request_timeout"])
    if raw.get("max_retries") is not None:
        settings.max_retries = int(raw["max_retries"])

    for env_key, field_name in _ENV_OVERRIDES.items():
        if environ.get(env_key):
            setattr(settings, field_name, environ[env_key])

    if settings.uses_supabase and not settings.supabase_key:
        raise ConfigError("supabase_url is set but supabase_key is missing")

    return settings
