"""
Application configuration using Pydantic Settings.

Typed settings loaded from environment variables and an optional .env file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingSettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Minimum log level")
    json_format: bool = Field(default=False, description="Render logs as JSON lines")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Upper-case the level and reject unknown names."""
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"unknown log level: {v}"
            raise ValueError(msg)
        return level


class TaxSettings(BaseSettings):
    """Tax display and validation settings."""

    model_config = SettingsConfigDict(env_prefix="TAX_")

    currency_symbol: str = Field(default="₹", description="Symbol printed before amounts")
    validation_tolerance: float = Field(
        default=0.01,
        ge=0,
        description="Allowed drift between breakdown sum and total tax",
    )
    display_decimals: int = Field(default=2, ge=0, le=6, description="Decimals shown for amounts")


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tax: TaxSettings = Field(default_factory=TaxSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
