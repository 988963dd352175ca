"""Application configuration management using Pydantic Settings."""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from growth_tracker.models.analytics import AnalyticsConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")

    # Flask Configuration
    secret_key: str = Field(..., alias="SECRET_KEY")

    # Logging Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Analytics Configuration
    risk_free_rate: float = Field(default=0.0, alias="RISK_FREE_RATE")
    trading_days_per_year: int = Field(
        default=252, gt=0, alias="TRADING_DAYS_PER_YEAR"
    )
    rolling_windows: List[int] = Field(
        default=[30, 60, 90], alias="ROLLING_WINDOWS"
    )
    volatility_period_steps: int = Field(
        default=30, ge=0, alias="VOLATILITY_PERIOD_STEPS"
    )
    best_worst_top_n: int = Field(default=5, ge=1, alias="BEST_WORST_TOP_N")

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        """Ensure SECRET_KEY is provided and not a placeholder."""
        if not v or v == "your-secret-key-here-change-in-production":
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v):
        """Validate application environment."""
        allowed_envs = {"development", "testing", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("rolling_windows")
    @classmethod
    def validate_rolling_windows(cls, v):
        """Rolling windows must be positive day counts."""
        if not v or any(w <= 0 for w in v):
            raise ValueError("ROLLING_WINDOWS must be a non-empty list of positive days")
        return v

    def analytics_config(self) -> AnalyticsConfig:
        """Build the analytics configuration handed to the engine."""
        return AnalyticsConfig(
            risk_free_rate=self.risk_free_rate,
            rolling_windows=self.rolling_windows,
            volatility_period_steps=self.volatility_period_steps,
            top_n=self.best_worst_top_n,
            trading_days_per_year=self.trading_days_per_year,
        )


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Get application settings instance."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Global settings instance - created on first use
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Reset global settings instance (useful for testing)."""
    global _settings
    _settings = None
