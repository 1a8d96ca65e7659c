"""
Configuration management using pydantic-settings.
All settings loaded from environment variables prefixed with ANALYTICS_.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Neutral zones (percentage change treated as "no movement")
    threshold_videos: float = Field(default=15.0, ge=0.0, description="Neutral zone for item count (%)")
    threshold_views: float = Field(default=10.0, ge=0.0, description="Neutral zone for total views (%)")
    threshold_median_views: float = Field(
        default=7.0, ge=0.0, description="Neutral zone for median views (%)"
    )
    threshold_subscribers: float = Field(
        default=5.0, ge=0.0, description="Neutral zone for subscribers (%)"
    )
    threshold_default: float = Field(
        default=10.0, ge=0.0, description="Neutral zone for any other metric (%)"
    )

    # Series
    projection_min_fraction: float = Field(
        default=0.1,
        gt=0.0,
        le=1.0,
        description="Floor on the elapsed fraction used to extrapolate the open bucket",
    )
    weekly_granularity_max_months: int = Field(
        default=6, ge=1, description="Windows up to this many months are bucketed by ISO week"
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and console renderers are supported."""
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure singleton behavior.
    """
    return Settings()
