"""Configuration management for babycal.

This module handles loading, validating, and creating the settings file
(~/.config/babycal/settings.yaml).
"""

import contextlib
from pathlib import Path

import questionary
import yaml
from pydantic import ValidationError

from babycal.config.interactive import run_interactive_wizard
from babycal.models import Settings
from babycal.utils.env import get_config_dir

SETTINGS_FILE_NAME = "settings.yaml"


class ConfigError(Exception):
    """Configuration-related error."""

    pass


class Configurator:
    """Configuration manager for babycal.

    Examples:
        # Use default path
        config = Configurator()
        settings = config.load()

        # Use custom path (useful for testing)
        config = Configurator(settings_path="/tmp/test-settings.yaml")
        settings = config.load()
    """

    def __init__(self, settings_path: Path | str | None = None) -> None:
        """Initialize configuration manager.

        Args:
            settings_path: Path to settings.yaml. If None, uses default
                location (~/.config/babycal/settings.yaml
                or $XDG_CONFIG_HOME/babycal/settings.yaml)
        """
        self.settings_path = (
            Path(settings_path) if settings_path else self._get_default_settings_path()
        )

    @staticmethod
    def _get_default_settings_path() -> Path:
        """Get default path for settings.yaml (respects XDG_CONFIG_HOME)."""
        return get_config_dir() / SETTINGS_FILE_NAME

    def load(self) -> Settings:
        """Load and validate settings from config file.

        Returns:
            Validated Settings instance

        Raises:
            ConfigError: If config file doesn't exist or is invalid
        """
        if not self.settings_path.exists():
            raise ConfigError(
                f"Configuration file not found: {self.settings_path}\n\n"
                "Please run 'babycal config' to set up your configuration."
            )

        try:
            return Settings.from_yaml_file(self.settings_path)
        except FileNotFoundError as e:
            raise ConfigError(
                f"Configuration file not found: {self.settings_path}\n\n"
                "Please run 'babycal config' to set up your configuration."
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML in configuration file:\n{e}\n\n"
                f"Please check {self.settings_path} for syntax errors."
            ) from e
        except (TypeError, ValidationError, ValueError) as e:
            raise ConfigError(
                f"Invalid configuration:\n{e}\n\n"
                "Please run 'babycal config' to update your configuration."
            ) from e

    def save(self, settings: Settings) -> None:
        """Write settings to the config file.

        Raises:
            ConfigError: If the file cannot be written
        """
        try:
            settings.to_yaml_file(self.settings_path)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

    def create(self, interactive: bool = True) -> Settings:
        """Create the configuration file.

        Existing settings, if loadable, are used as defaults for the wizard.

        Args:
            interactive: If True, run interactive setup wizard. If False,
                write default settings that need manual editing.

        Returns:
            The saved settings

        Raises:
            ConfigError: If configuration creation fails
        """
        current_settings = None
        if self.settings_path.exists():
            with contextlib.suppress(ConfigError):
                current_settings = self.load()

        if interactive:
            settings = run_interactive_wizard(defaults=current_settings)
        else:
            settings = current_settings or Settings()

        self.save(settings)
        questionary.print(
            f"\n✓ Configuration saved to {self.settings_path}", style="green"
        )
        return settings


# Convenience functions that use default paths


def load_settings() -> Settings:
    """Load and validate settings from default config file.

    Raises:
        ConfigError: If config file doesn't exist or is invalid
    """
    return Configurator().load()


def get_config_path() -> Path:
    """Return path to default settings.yaml file (may not exist yet)."""
    return Configurator._get_default_settings_path()


def create_default_config(interactive: bool = True) -> Settings:
    """Create configuration file at default location.

    Raises:
        ConfigError: If configuration creation fails
    """
    return Configurator().create(interactive=interactive)
