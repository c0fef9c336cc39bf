"""Unit tests for babycal.utils.env module."""

import logging
from datetime import date

import pytest

from babycal.utils.env import (
    FAKE_DATE_ENV,
    cache_dir_for_home,
    config_dir_for_home,
    data_dir_for_home,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    get_home_dir,
    get_today,
)


@pytest.mark.unit
class TestDirectories:
    """Test XDG-aware directory resolution."""

    def test_home_from_env(self, isolated_home):
        """Test HOME is respected."""
        assert get_home_dir() == isolated_home

    def test_defaults_under_home(self, isolated_home):
        """Test the directories default to the XDG locations under HOME."""
        assert get_config_dir() == config_dir_for_home(isolated_home)
        assert get_data_dir() == data_dir_for_home(isolated_home)
        assert get_cache_dir() == cache_dir_for_home(isolated_home)
        assert get_data_dir() == isolated_home / ".local" / "share" / "babycal"

    @pytest.mark.parametrize(
        ("var", "getter"),
        [
            ("XDG_CONFIG_HOME", get_config_dir),
            ("XDG_DATA_HOME", get_data_dir),
            ("XDG_CACHE_HOME", get_cache_dir),
        ],
    )
    def test_xdg_override(self, isolated_home, monkeypatch, var, getter):
        """Test absolute XDG variables are used."""
        monkeypatch.setenv(var, str(isolated_home / "xdg"))
        assert getter() == isolated_home / "xdg" / "babycal"

    def test_relative_xdg_ignored(self, isolated_home, monkeypatch, caplog):
        """Test relative XDG variables are ignored with a warning."""
        monkeypatch.setenv("XDG_DATA_HOME", "relative")
        with caplog.at_level(logging.WARNING):
            assert get_data_dir() == data_dir_for_home(isolated_home)
        assert "XDG_DATA_HOME" in caplog.text


@pytest.mark.unit
class TestGetToday:
    """Test the overridable current day."""

    def test_fake_date(self, monkeypatch):
        """Test BABYCAL_FAKE_DATE is used when valid."""
        monkeypatch.setenv(FAKE_DATE_ENV, "2025-11-15")
        assert get_today() == date(2025, 11, 15)

    @pytest.mark.parametrize("value", ["2025-02-30", "2025-1-5", "20251115"])
    def test_invalid_fake_date(self, monkeypatch, caplog, value):
        """Test an invalid or unpadded fake date is logged and ignored."""
        monkeypatch.setenv(FAKE_DATE_ENV, value)
        with caplog.at_level(logging.WARNING):
            result = get_today()
        assert isinstance(result, date)
        assert result != date(2025, 1, 5)
        assert FAKE_DATE_ENV in caplog.text
