"""
Shared settings for the Klaviyo bridge.

Fields every process reads, API callers and Celery workers alike: the
deployment environment and the root log level.

Dependencies: pydantic_settings
System role: Base class of the aggregated Settings
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production"]


class BaseSettings(PydanticBaseSettings):
    """Environment and log level, read from the process env or `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default="development",
        description="Deployment environment; 'production' requires KLAVIYO_API_KEY",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging in workers",
    )
