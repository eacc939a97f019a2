"""
Application Configuration
=========================
Centralized configuration management using Pydantic Settings.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Billing settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pricing
    max_tokens_per_unit: int = Field(default=4000, gt=0)
    price_per_unit: Decimal = Field(default=Decimal("0.02"), gt=0)
    auto_charge_max_units: int = Field(default=5, ge=1)

    # Quotes
    quote_ttl_ms: int = Field(default=300_000, gt=0)
    sweep_interval_ms: int = Field(default=60_000, gt=0)
    sweep_enabled: bool = True

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Tool pricing config path
    tool_pricing_config_path: str = "config/tool_pricing.yaml"

    @property
    def quote_ttl_seconds(self) -> float:
        return self.quote_ttl_ms / 1000

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

