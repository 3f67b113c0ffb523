"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path
from typing import Any

import pytz
import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from symptom_journal.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """Entry store file locations."""

    data_dir: str = "~/.local/share/symptom_journal"
    entries_file: str = "symptom_entries.json"
    draft_file: str = "symptom_draft.json"
    backup_file: str = "symptom_entries_backup.json"
    file_mode: int = 0o600

    @property
    def entries_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.entries_file

    @property
    def draft_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.draft_file

    @property
    def backup_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.backup_file


class ReportConfig(BaseModel):
    """PDF report layout configuration."""

    timezone: str = "UTC"
    page_width: float = 612
    page_height: float = 792
    top_margin: float = 50
    page_break_threshold: float = 700
    always_break_before: list[str] = Field(default_factory=lambda: ["musculoskeletal"])
    chart_max_entries: int = Field(10, ge=1)
    chart_break_threshold: float = 600
    include_series_chart: bool = True
    page_compression: bool = True
    font_file: str | None = None
    bold_font_file: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value


class ExportConfig(BaseModel):
    """Export output configuration."""

    output_dir: str = "output"
    csv_file_name: str = "symptom_entries.csv"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    reports: ReportConfig = Field(default_factory=ReportConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="SJ_", env_nested_delimiter="__", case_sensitive=False
    )


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get entry store configuration."""
        return self.config.storage

    def get_report_config(self) -> ReportConfig:
        """Get report layout configuration."""
        return self.config.reports

    def get_export_config(self) -> ExportConfig:
        """Get export output configuration."""
        return self.config.export

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def get_raw_config(self) -> dict[str, Any]:
        """
        Get raw configuration dictionary.

        Returns:
            Dictionary representation of the configuration.
        """
        return self.config.model_dump()
