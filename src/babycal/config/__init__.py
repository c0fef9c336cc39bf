"""Configuration management for babycal.

This module provides configuration loading, validation, and creation
functionality for the babycal application.
"""

from babycal.config.base import (
    ConfigError,
    Configurator,
    create_default_config,
    get_config_path,
    load_settings,
)

__all__ = [
    "ConfigError",
    "Configurator",
    "create_default_config",
    "get_config_path",
    "load_settings",
]
