"""
Configuration Management for csv2qif

Two kinds of configuration exist:
1. Runtime settings (logging, file encodings) - read from environment
   variables with pydantic-settings, prefix CSV2QIF_
2. The conversion config file (column mapping and options) - a JSON file
   named on the command line, validated into ConverterConfig

DESIGN DECISION: Both are validated at startup.
A broken config file stops the run before any output file is touched.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Literal, Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csv2qif.errors import ConfigLoadError
from csv2qif.models.config import ConverterConfig


class AppSettings(BaseSettings):
    """
    Runtime settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CSV2QIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="WARNING",
        description="Minimum level written to stderr"
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Render log lines for humans or as JSON"
    )
    csv_encoding: str = Field(
        default="utf-8-sig",
        description="Encoding of the CSV input (utf-8-sig drops a BOM)"
    )
    qif_encoding: str = Field(
        default="utf-8",
        description="Encoding of the QIF output"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def load_config(config_path: Union[str, Path]) -> ConverterConfig:
    """
    Load the conversion config from a JSON file.

    Fields missing from the file keep their defaults (no column mapped,
    no date translation, account type Bank).

    Raises:
        ConfigLoadError: If the file is unreadable, is not a JSON object,
            or holds values of the wrong type
    """
    path = str(config_path)
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(path, f"Cannot read config file {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigLoadError(path, f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(path, f"Config file {path} must contain a JSON object")

    try:
        return ConverterConfig.from_flat(data)
    except ValidationError as e:
        raise ConfigLoadError(path, f"Invalid value in config file {path}: {e}") from e
