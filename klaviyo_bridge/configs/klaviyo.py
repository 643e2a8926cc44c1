"""
Klaviyo API configuration settings.

Credentials, endpoint, API revision and transport retry policy for the
outbound Klaviyo client.

Dependencies: pydantic_settings
System role: Outbound integration configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

KLAVIYO_API_REVISION = "2024-10-15"


class KlaviyoSettings(BaseSettings):
    """Klaviyo REST API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KLAVIYO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="Klaviyo private API key")
    api_url: str = Field(
        default="https://a.klaviyo.com/api",
        description="Klaviyo API base URL",
    )
    api_version: str = Field(
        default=KLAVIYO_API_REVISION,
        description="Value sent in the 'revision' header",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    # Transport retry policy (5xx and connection faults only)
    transport_max_attempts: int = Field(
        default=2,
        ge=1,
        description="Total HTTP attempts per call, including the first",
    )
    transport_retry_delay: float = Field(
        default=0.1,
        ge=0,
        description="Fixed delay between HTTP attempts in seconds",
    )

    # Catalog item composite id parts
    catalog_scope: str = Field(default="$custom", description="Catalog integration type")
    catalog_list: str = Field(default="$default", description="Catalog type")
