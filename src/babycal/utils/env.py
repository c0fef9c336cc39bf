"""Environment-aware path and clock resolution utilities.

This module provides centralized functions for resolving application directories
that respect XDG Base Directory specification and HOME environment variable,
and the process-wide "today" used by the date/age core.
"""

import logging
import os
import re
from datetime import UTC, date, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR_NAME = "babycal"

FAKE_DATE_ENV = "BABYCAL_FAKE_DATE"
FAKE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _validate_xdg_path(
    xdg_var_name: str, xdg_value: str, fallback_subdir: str
) -> Path | None:
    """Validate XDG path per XDG Base Directory specification.

    Args:
        xdg_var_name: Name of the XDG environment variable
        xdg_value: Value from the environment variable
        fallback_subdir: Subdirectory to append (e.g., "babycal")

    Returns:
        Path object if valid absolute path, None if invalid (should use fallback)
    """
    xdg_path = Path(xdg_value)
    if not xdg_path.is_absolute():
        logger.warning(
            "%s contains relative path '%s' which violates "
            "XDG Base Directory specification. Ignoring and using default.",
            xdg_var_name,
            xdg_value,
        )
        return None
    return xdg_path / fallback_subdir


def _resolve_xdg_dir(xdg_var_name: str, home_fallback: Path) -> Path:
    xdg_value = os.environ.get(xdg_var_name)
    if xdg_value:
        validated_path = _validate_xdg_path(xdg_var_name, xdg_value, APP_DIR_NAME)
        if validated_path:
            return validated_path
    return home_fallback


def get_home_dir() -> Path:
    """Get the user's home directory.

    Respects HOME environment variable, falls back to Path.home().

    Returns:
        Path to the user's home directory
    """
    home = os.environ.get("HOME")
    return Path(home) if home else Path.home()


def config_dir_for_home(home_dir: Path) -> Path:
    """Build the babycal config directory path (~/.config/babycal)."""
    return home_dir / ".config" / APP_DIR_NAME


def data_dir_for_home(home_dir: Path) -> Path:
    """Build the babycal data directory path (~/.local/share/babycal)."""
    return home_dir / ".local" / "share" / APP_DIR_NAME


def cache_dir_for_home(home_dir: Path) -> Path:
    """Build the babycal cache directory path (~/.cache/babycal)."""
    return home_dir / ".cache" / APP_DIR_NAME


def get_config_dir() -> Path:
    """Get the application's configuration directory.

    Respects XDG_CONFIG_HOME and HOME environment variables.
    Per XDG spec, relative paths in XDG_CONFIG_HOME are ignored.

    Returns:
        Path to the babycal configuration directory
    """
    return _resolve_xdg_dir("XDG_CONFIG_HOME", config_dir_for_home(get_home_dir()))


def get_data_dir() -> Path:
    """Get the application's data directory (achievement records live here).

    Respects XDG_DATA_HOME and HOME environment variables.

    Returns:
        Path to the babycal data directory
    """
    return _resolve_xdg_dir("XDG_DATA_HOME", data_dir_for_home(get_home_dir()))


def get_cache_dir() -> Path:
    """Get the application's cache directory (log file lives here).

    Respects XDG_CACHE_HOME and HOME environment variables.

    Returns:
        Path to the babycal cache directory
    """
    return _resolve_xdg_dir("XDG_CACHE_HOME", cache_dir_for_home(get_home_dir()))


def get_today() -> date:
    """Get today's calendar day, normalized to UTC.

    Supports BABYCAL_FAKE_DATE environment variable for testing.
    Format: YYYY-MM-DD (e.g., "2025-11-15")

    Returns:
        Today's date (or fake date if BABYCAL_FAKE_DATE is set)
    """
    fake_date = os.environ.get(FAKE_DATE_ENV)
    if fake_date:
        try:
            if not FAKE_DATE_PATTERN.match(fake_date):
                raise ValueError(fake_date)
            return datetime.strptime(fake_date, "%Y-%m-%d").date()
        except ValueError:
            logger.warning(
                "Invalid %s '%s' (expected YYYY-MM-DD). Using real date.",
                FAKE_DATE_ENV,
                fake_date,
            )
    return datetime.now(UTC).date()
