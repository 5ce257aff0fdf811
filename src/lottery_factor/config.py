"""Configuration settings for lottery-factor."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Configuration for upstream sync behavior.

    Controls GraphQL page size and the default lookback window.
    """

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Items requested per GraphQL page (GitHub maximum is 100)",
    )
    default_days: int = Field(
        default=30,
        ge=1,
        description="Lookback window in days when none is given",
    )


class ReportConfig(BaseModel):
    """Configuration for the lottery factor report.

    Controls how many contributors are shown and where risk levels start.
    """

    top_display_count: int = Field(
        default=5,
        ge=1,
        description="Contributors listed individually before 'Other Contributors'",
    )
    top_contributor_count: int = Field(
        default=2,
        ge=1,
        description="Contributors counted towards the lottery factor percentage",
    )
    high_risk_threshold_pct: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Concentration % above which risk is High",
    )
    medium_risk_threshold_pct: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Concentration % above which risk is Medium",
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> "ReportConfig":
        if self.medium_risk_threshold_pct > self.high_risk_threshold_pct:
            raise ValueError("medium_risk_threshold_pct must not exceed high_risk_threshold_pct")
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./lottery_factor.db",
        description="Async SQLite database connection string",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token (sent as a bearer credential)",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Upstream sync configuration",
    )

    # --------------------------------------------------------------------------
    # Report Configuration
    # --------------------------------------------------------------------------
    report: ReportConfig = Field(
        default_factory=ReportConfig,
        description="Lottery factor report configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
