"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Variables use the ``HERITAGE_RISK_`` prefix, e.g.
    ``HERITAGE_RISK_LOG_LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="HERITAGE_RISK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Trend analysis
    forecast_horizon: int = Field(default=3, ge=1, le=24)
    """Number of forecast points produced beyond the last observation."""

    forecast_interval_days: int = Field(default=30, ge=1, le=366)
    """Spacing between forecast points."""

    trend_stable_ratio: float = Field(default=0.2, ge=0.0, le=1.0)
    """Projected slope, as a share of the residual range, below which a trend is stable."""

    # Comparative analysis
    min_correlation_points: int = Field(default=3, ge=3, le=100)
    """Aligned points required before a correlation is reported."""

    # Threat evolution
    critical_magnitude_threshold: int = Field(default=9, ge=3, le=15)
    """Magnitude at or above which a timeline entry is part of a critical period."""

    evolution_margin: float = Field(default=1.0, ge=0.0, le=12.0)
    """Mean magnitude difference needed to call a threat escalating or improving."""

    # Site aggregation
    precautionary_uncertainty_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    """Share of high-uncertainty assessments above which site risk is escalated."""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
