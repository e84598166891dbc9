"""Configuration for symbol imports."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    ImporterConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ImporterConfig",
    "load_config",
]
