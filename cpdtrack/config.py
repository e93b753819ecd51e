"""
cpdtrack Configuration Module
=============================

Centralized configuration management using Pydantic Settings.

Loads configuration from:
    1. Environment variables
    2. .env file (if present)
    3. Default values

Usage:
    from cpdtrack.config import settings

    print(settings.postgres_async_dsn)
    print(settings.risk_deadline_horizon_days)

Author: cpdtrack Team
Version: 1.0.0
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Naming convention: UPPER_SNAKE_CASE in env, lower_snake_case in code.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(default="cpdtrack", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # =========================================================================
    # API Server
    # =========================================================================

    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    cors_allowed_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # =========================================================================
    # PostgreSQL
    # =========================================================================

    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    postgres_db: str = Field(default="cpdtrack", description="PostgreSQL database")
    postgres_user: str = Field(default="cpdtrack_user", description="PostgreSQL user")
    postgres_password: str = Field(
        default="cpdtrack_password_change_me",
        description="PostgreSQL password"
    )
    use_in_memory_store: bool = Field(
        default=False,
        description="Serve the API from the in-memory store instead of PostgreSQL"
    )

    @property
    def postgres_dsn(self) -> str:
        """Get PostgreSQL connection string."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def postgres_async_dsn(self) -> str:
        """Get async PostgreSQL connection string for asyncpg."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # =========================================================================
    # Benchmarking
    # =========================================================================

    benchmark_min_cohort_size: int = Field(
        default=5,
        ge=1,
        description="Cohorts smaller than this are flagged as low confidence"
    )
    benchmark_batch_concurrency: int = Field(
        default=4,
        ge=1,
        description="Snapshot keys generated in parallel during a batch run"
    )

    # =========================================================================
    # Risk Scoring Weights
    # =========================================================================

    risk_weight_hours_remaining: float = Field(
        default=0.50,
        ge=0.0,
        le=1.0,
        description="Weight for hours-remaining factor"
    )
    risk_weight_deadline_pressure: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Weight for deadline-pressure factor"
    )
    risk_weight_activity_trend: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Weight for activity-trend factor"
    )

    # =========================================================================
    # Risk Scoring Windows
    # =========================================================================

    risk_deadline_horizon_days: int = Field(
        default=180,
        ge=1,
        description="Deadlines at least this far away carry no pressure (days)"
    )
    risk_activity_staleness_days: int = Field(
        default=30,
        ge=1,
        description="Inactivity window after which activity risk is maximal (days)"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings instance
    """
    return Settings()


# Convenience alias
settings = get_settings()
