from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "symbolimport.toml"

DEFAULT_PLUGIN_IDENTIFIER = "com.symbolimporter.plugin"

MatchBy = Literal["id", "name"]


class ImporterConfig(BaseModel):
    """Configuration for symbol imports."""

    model_config = ConfigDict(extra="forbid")

    match_by: MatchBy = Field(
        default="id",
        description="Default matching mode: symbol identifier or display name",
    )
    plugin_identifier: str = Field(
        default=DEFAULT_PLUGIN_IDENTIFIER,
        min_length=1,
        description="Namespace under which import identity metadata is stored",
    )
    symbols_page_name: str = Field(
        default="Symbols",
        min_length=1,
        description="Page made current in the target document after an import",
    )
    show_symbols_page: bool = Field(
        default=True,
        description="Switch the target document to the symbols page after import",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level name used by the command-line interface",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> object:
        """Accept standard logging level names in any case."""
        if not isinstance(v, str):
            msg = "log_level must be a string"
            raise TypeError(msg)

        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Invalid log_level '{v}'"
            raise ValueError(msg)

        return level


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> ImporterConfig:
    """Load configuration from symbolimport.toml if it exists."""
    config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        return ImporterConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ImporterConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
