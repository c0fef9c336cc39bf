"""Unit tests for babycal.config module.

Tests configuration management including path resolution, loading,
validation, and creation.
"""

from datetime import date
from unittest.mock import Mock, patch

import pytest

from babycal.age import AgeFormat
from babycal.config import (
    ConfigError,
    Configurator,
    create_default_config,
    get_config_path,
    load_settings,
)
from babycal.config.interactive import (
    _validate_limit,
    _validate_optional_date,
    _validate_required_date,
)
from babycal.models import DEFAULT_CORRECTED_UNTIL_MONTHS, Settings


def _answers(responses: dict[str, object]):
    """Build a questionary prompt factory answering by prompt substring."""

    def factory(prompt, **kwargs):
        mock = Mock()
        for key, value in responses.items():
            if key in prompt:
                mock.unsafe_ask.return_value = value
                return mock
        mock.unsafe_ask.return_value = kwargs.get("default", "")
        return mock

    return factory


class TestPathResolution:
    """Test path resolution functions."""

    def test_get_config_path_with_xdg_config_home(self, tmp_path, monkeypatch):
        """Test get_config_path() respects XDG_CONFIG_HOME environment variable."""
        xdg_home = tmp_path / "config"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_home))

        assert get_config_path() == xdg_home / "babycal" / "settings.yaml"

    def test_get_config_path_without_xdg_config_home(self, isolated_home):
        """Test get_config_path() uses ~/.config when XDG_CONFIG_HOME not set."""
        assert get_config_path() == (
            isolated_home / ".config" / "babycal" / "settings.yaml"
        )

    def test_relative_xdg_config_home_ignored(self, isolated_home, monkeypatch):
        """Test a relative XDG_CONFIG_HOME falls back to ~/.config."""
        monkeypatch.setenv("XDG_CONFIG_HOME", "relative/config")

        assert get_config_path() == (
            isolated_home / ".config" / "babycal" / "settings.yaml"
        )

    def test_init_with_string_path(self, tmp_path):
        """Test Configurator accepts string paths."""
        configurator = Configurator(settings_path=str(tmp_path / "settings.yaml"))

        assert configurator.settings_path == tmp_path / "settings.yaml"


class TestLoadSettings:
    """Test loading and validating the settings file."""

    def test_load_valid_config(self, tmp_path):
        """Test loading a valid settings file."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text(
            "profile:\n"
            "  name: Hana\n"
            "  birth_date: '2025-10-01'\n"
            "  due_date: '2025-12-01'\n"
            "display:\n"
            "  age_format: ymd\n"
            "  show_corrected_until_months: 18\n"
        )

        settings = Configurator(settings_path=settings_file).load()

        assert settings.profile.name == "Hana"
        assert settings.profile.birth_date == date(2025, 10, 1)
        assert settings.display.age_format is AgeFormat.YMD
        assert settings.display.show_corrected_until_months == 18

    def test_load_unquoted_dates(self, tmp_path):
        """Test YAML dates (parsed by PyYAML as dates) are accepted."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("profile:\n  birth_date: 2025-10-01\n")

        settings = Configurator(settings_path=settings_file).load()

        assert settings.profile.birth_date == date(2025, 10, 1)

    def test_load_missing_config(self, tmp_path):
        """Test a missing file raises ConfigError with a hint."""
        configurator = Configurator(settings_path=tmp_path / "missing.yaml")

        with pytest.raises(ConfigError, match="babycal config"):
            configurator.load()

    def test_load_invalid_yaml(self, tmp_path):
        """Test broken YAML raises ConfigError naming the file."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("profile: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML") as exc_info:
            Configurator(settings_path=settings_file).load()
        assert str(settings_file) in str(exc_info.value)

    def test_load_invalid_date(self, tmp_path):
        """Test a nonexistent birth date raises ConfigError."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("profile:\n  birth_date: '2025-02-30'\n")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            Configurator(settings_path=settings_file).load()

    def test_load_non_mapping(self, tmp_path):
        """Test a YAML list raises ConfigError."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("- profile\n")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            Configurator(settings_path=settings_file).load()

    def test_load_settings_convenience_function(self, isolated_home):
        """Test load_settings() reads the default location."""
        Settings(profile={"name": "Hana"}).to_yaml_file(get_config_path())

        assert load_settings().profile.name == "Hana"


class TestCreateConfig:
    """Test configuration creation."""

    def test_create_non_interactive(self, tmp_path):
        """Test non-interactive creation writes default settings."""
        settings_file = tmp_path / "sub" / "settings.yaml"

        with patch("babycal.config.base.questionary.print"):
            settings = Configurator(settings_path=settings_file).create(
                interactive=False
            )

        assert settings == Settings()
        assert Settings.from_yaml_file(settings_file) == Settings()
        assert settings_file.stat().st_mode & 0o777 == 0o600

    def test_create_keeps_existing_settings(self, tmp_path):
        """Test non-interactive creation keeps a loadable existing file."""
        settings_file = tmp_path / "settings.yaml"
        Settings(profile={"name": "Hana"}).to_yaml_file(settings_file)

        with patch("babycal.config.base.questionary.print"):
            settings = Configurator(settings_path=settings_file).create(
                interactive=False
            )

        assert settings.profile.name == "Hana"

    def test_create_replaces_broken_file(self, tmp_path):
        """Test a broken existing file is replaced by defaults."""
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("profile: [unclosed\n")

        with patch("babycal.config.base.questionary.print"):
            settings = Configurator(settings_path=settings_file).create(
                interactive=False
            )

        assert settings == Settings()

    def test_create_default_config(self, isolated_home):
        """Test create_default_config() writes to the default location."""
        with patch("babycal.config.base.questionary.print"):
            create_default_config(interactive=False)

        assert get_config_path().exists()

    def test_interactive(self, tmp_path):
        """Test the wizard answers end up in the settings file."""
        settings_file = tmp_path / "settings.yaml"
        responses = {
            "Name:": "Hana",
            "Birth date": "2025-10-01",
            "Due date": "2025-12-01",
            "Age format:": "ymd",
            "Show corrected age until": "none",
            "days since birth": False,
            "premature": True,
        }

        with (
            patch("babycal.config.interactive.questionary.text") as mock_text,
            patch("babycal.config.interactive.questionary.select") as mock_select,
            patch("babycal.config.interactive.questionary.confirm") as mock_confirm,
            patch("babycal.config.interactive.questionary.print"),
            patch("babycal.config.base.questionary.print"),
        ):
            mock_text.side_effect = _answers(responses)
            mock_select.side_effect = _answers(responses)
            mock_confirm.side_effect = _answers(responses)

            Configurator(settings_path=settings_file).create(interactive=True)

        settings = Settings.from_yaml_file(settings_file)
        assert settings.profile.name == "Hana"
        assert settings.profile.birth_date == date(2025, 10, 1)
        assert settings.profile.due_date == date(2025, 12, 1)
        assert settings.display.age_format is AgeFormat.YMD
        assert settings.display.show_corrected_until_months is None
        assert settings.display.show_days_since_birth is False

    def test_interactive_empty_due_date_and_limit(self, tmp_path):
        """Test empty answers mean no due date and the default horizon."""
        settings_file = tmp_path / "settings.yaml"
        responses = {
            "Birth date": "2025-10-01",
            "Due date": "",
            "Show corrected age until": "",
        }

        with (
            patch("babycal.config.interactive.questionary.text") as mock_text,
            patch("babycal.config.interactive.questionary.select") as mock_select,
            patch("babycal.config.interactive.questionary.confirm") as mock_confirm,
            patch("babycal.config.interactive.questionary.print"),
            patch("babycal.config.base.questionary.print"),
        ):
            mock_text.side_effect = _answers(responses)
            mock_select.side_effect = _answers(responses)
            mock_confirm.side_effect = _answers(responses)

            settings = Configurator(settings_path=settings_file).create()

        assert settings.profile.due_date is None
        assert settings.display.show_corrected_until_months == (
            DEFAULT_CORRECTED_UNTIL_MONTHS
        )


class TestWizardValidators:
    """Test input validators of the wizard."""

    def test_optional_date(self):
        """Test empty and valid dates pass, invalid ones get a message."""
        assert _validate_optional_date("") is True
        assert _validate_optional_date("2025-10-01") is True
        assert isinstance(_validate_optional_date("2025-02-30"), str)

    def test_required_date(self):
        """Test the birth date cannot be empty."""
        assert _validate_required_date("") == "Birth date is required"
        assert _validate_required_date("2025-10-01") is True

    @pytest.mark.parametrize("value", ["", "none", "NONE", "24", "0"])
    def test_limit_accepted(self, value):
        """Test numbers, 'none' and empty are accepted."""
        assert _validate_limit(value) is True

    @pytest.mark.parametrize("value", ["-1", "two", "1.5"])
    def test_limit_rejected(self, value):
        """Test anything else gets a message."""
        assert isinstance(_validate_limit(value), str)
