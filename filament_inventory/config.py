"""Application configuration objects."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Pydantic settings used to configure the application."""

    model_config = SettingsConfigDict(
        env_prefix="FILAMENT_INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(
        default=Path("Data"),
        description="Directory holding the inventory and warning level files.",
    )
    inventory_filename: str = Field(
        default="Inventory.txt",
        description="Name of the comma-delimited inventory file inside data_dir.",
    )
    threshold_filename: str = Field(
        default="Sentinel.txt",
        description="Name of the warning level file inside data_dir.",
    )
    default_threshold: int = Field(
        default=250,
        ge=0,
        description="Warning level, in grams, used when none has been saved.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Standard logging level name.",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Write logs to this rotating file instead of stderr.",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}")
        return normalized

    @field_validator("inventory_filename", "threshold_filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        if not value.strip() or Path(value).name != value:
            raise ValueError("File names must not be empty or contain directories")
        return value

    @property
    def inventory_path(self) -> Path:
        return self.data_dir / self.inventory_filename

    @property
    def threshold_path(self) -> Path:
        return self.data_dir / self.threshold_filename

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of :class:`Settings`."""

    return Settings()


__all__ = ["Settings", "get_settings"]
