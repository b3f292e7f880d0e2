"""
Configuration management for the aggregation engine.

The engine functions never read these settings themselves; callers such as
the CLI load them once and pass the values in explicitly.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timebill.calculators.colors import DEFAULT_PALETTE, MIN_PALETTE_SIZE
from timebill.models.aggregates import DEFAULT_UNASSIGNED_LABEL


class EngineSettings(BaseSettings):
    """Configuration settings for reports and invoices."""

    # Reporting Configuration
    timezone: str = Field(default="UTC", alias="TIMEZONE")
    default_tax_rate: Decimal = Field(default=Decimal("0.10"), alias="DEFAULT_TAX_RATE")
    unassigned_label: str = Field(
        default=DEFAULT_UNASSIGNED_LABEL, alias="UNASSIGNED_LABEL"
    )
    color_palette: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PALETTE), alias="COLOR_PALETTE"
    )

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("default_tax_rate")
    @classmethod
    def validate_tax_rate(cls, v):
        """Ensure the tax rate is a non-negative fraction."""
        if v < 0:
            raise ValueError("Tax rate must not be negative")
        return v

    @field_validator("color_palette")
    @classmethod
    def validate_color_palette(cls, v):
        """Ensure the palette has enough colors for stable assignment."""
        if len(v) < MIN_PALETTE_SIZE:
            raise ValueError(
                f"Color palette must have at least {MIN_PALETTE_SIZE} colors"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    def get_tzinfo(self) -> dt.tzinfo:
        """Get the reporting timezone as a tzinfo object."""
        return ZoneInfo(self.timezone)


def load_config(env_file: Optional[str] = None) -> EngineSettings:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return EngineSettings()


# Global configuration instance
_config: Optional[EngineSettings] = None


def get_config() -> EngineSettings:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> EngineSettings:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
