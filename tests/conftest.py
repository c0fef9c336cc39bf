"""Pytest configuration and shared fixtures for babycal tests."""

from pathlib import Path

import pytest
from _pytest.config import Config

from babycal.utils.env import FAKE_DATE_ENV
from babycal.utils.logging import LOG_LEVEL_ENV


def pytest_configure(config: Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Set up isolated HOME environment for testing.

    HOME points to a temp directory and the XDG variables, the fake date
    and the log level overrides are unset, so that default path resolution
    never touches the user's real directories.

    Returns:
        Path: The temporary home directory
    """
    for var in ("XDG_CONFIG_HOME", "XDG_DATA_HOME", "XDG_CACHE_HOME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv(FAKE_DATE_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path
