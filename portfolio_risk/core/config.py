"""Pydantic-settings configuration for the portfolio risk engine.

Loads engine parameters from RISK_ENGINE_* environment variables (or a .env
file) with defaults matching the documented engine constants. Policy
thresholds are not settings; they arrive per request and are merged in
``RiskPolicyConfig.from_partial``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_risk.core.defaults import (
    COVERAGE_SENTINEL,
    DEFAULT_DISTRIBUTION_RATE,
    FORECAST_QUARTERS,
    HISTORY_QUARTERS,
    PENDING_CALL_WINDOW_DAYS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RISK_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Time buckets
    history_quarters: int = Field(default=HISTORY_QUARTERS, ge=1)
    forecast_quarters: int = Field(default=FORECAST_QUARTERS, ge=4)

    # Liquidity
    pending_call_window_days: int = Field(default=PENDING_CALL_WINDOW_DAYS, ge=0)
    coverage_sentinel: float = Field(default=COVERAGE_SENTINEL, gt=0)
    default_distribution_rate: float = Field(default=DEFAULT_DISTRIBUTION_RATE, ge=0)

    # Logging
    log_level: str = "INFO"


# Singleton instance
settings = Settings()
