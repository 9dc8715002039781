"""
Configuration management for PyCGGTTS.

Uses Pydantic for validation and supports YAML configuration files
with environment variable expansion.
"""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from pycggtts.core.exceptions import ConfigurationError


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_dir: Path | None = None
    log_to_file: bool = False
    log_to_console: bool = True
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level


class SchedulerConfig(BaseModel):
    """Common-view period configuration (seconds)."""

    setup_duration_s: int = 180
    tracking_duration_s: int = 780

    @field_validator("tracking_duration_s")
    @classmethod
    def validate_tracking(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("tracking duration must be positive")
        return v

    @field_validator("setup_duration_s")
    @classmethod
    def validate_setup(cls, v: int) -> int:
        if v < 0:
            raise ValueError("setup duration must not be negative")
        return v

    @property
    def setup_duration(self) -> timedelta:
        return timedelta(seconds=self.setup_duration_s)

    @property
    def tracking_duration(self) -> timedelta:
        return timedelta(seconds=self.tracking_duration_s)


class TrackerConfig(BaseModel):
    """Track reduction configuration."""

    sampling_period_s: float = 30.0

    @field_validator("sampling_period_s")
    @classmethod
    def validate_sampling(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("sampling period must be positive")
        return v

    @property
    def sampling_period(self) -> timedelta:
        return timedelta(seconds=self.sampling_period_s)


class OutputConfig(BaseModel):
    """File naming configuration."""

    lab: str | None = None
    receiver_id: str | None = None
    output_dir: Path = Field(default=Path("."))


class Settings(BaseSettings):
    """Main settings container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    class Config:
        env_prefix = "PYCGGTTS_"
        env_nested_delimiter = "__"


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML file.

    Args:
        config_path: Path to YAML configuration file.
                    If None, tries default locations.

    Returns:
        Settings instance.

    Raises:
        ConfigurationError: If an explicit config_path does not exist, or
            the file is not valid YAML
    """
    search_paths = []

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        search_paths.append(path)
    else:
        # Default search locations
        search_paths.extend([
            Path("config/settings.local.yaml"),
            Path("config/settings.yaml"),
            Path.home() / ".pycggtts" / "settings.yaml",
        ])

    config_data: dict[str, Any] = {}

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    raw_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
            if raw_data:
                config_data = expand_env_vars(raw_data)
            break

    return Settings(**config_data)
