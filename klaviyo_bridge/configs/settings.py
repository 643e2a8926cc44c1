"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import model_validator

from klaviyo_bridge.configs.base import BaseSettings
from klaviyo_bridge.configs.celery_config import CelerySettings
from klaviyo_bridge.configs.klaviyo import KlaviyoSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    klaviyo: KlaviyoSettings = KlaviyoSettings()
    celery: CelerySettings = CelerySettings()

    @model_validator(mode="after")
    def _require_api_key_in_production(self) -> "Settings":
        """Reject a missing Klaviyo API key outside development."""
        if self.environment == "production" and not self.klaviyo.api_key.strip():
            raise ValueError(
                "Missing required environment variable: KLAVIYO_API_KEY. "
                "Required in production mode."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from klaviyo_bridge.configs import get_settings
        settings = get_settings()
    """
    return Settings()
