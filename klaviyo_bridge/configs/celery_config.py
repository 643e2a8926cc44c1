"""
Celery configuration settings.

Manages Celery broker and result backend configuration for async task processing.
Includes queue routing and the per-task retry policies.

Dependencies: pydantic, pydantic_settings
System role: Async task queue configuration for Klaviyo dispatch
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class CelerySettings(BaseSettings):
    """Celery and RabbitMQ configuration."""

    broker_host: str = Field(default="localhost", description="RabbitMQ host")
    broker_port: int = Field(default=5672, description="RabbitMQ port")
    broker_user: str = Field(default="guest", description="RabbitMQ user")
    broker_password: str = Field(default="guest", description="RabbitMQ password")
    broker_vhost: str = Field(default="/", description="RabbitMQ virtual host")

    result_backend_host: str = Field(default="localhost", description="Redis host for results")
    result_backend_port: int = Field(default=6379, description="Redis port")
    result_backend_db: int = Field(default=0, description="Redis database number")

    task_serializer: str = Field(default="json", description="Task serialization format")
    result_serializer: str = Field(default="json", description="Result serialization format")
    accept_content: list[str] = Field(
        default=["json"],
        description="Accepted content types",
    )
    timezone: str = Field(default="UTC", description="Celery timezone")

    # Queue routing
    events_queue: str = Field(default="klaviyo", description="Queue for identify/track/delete work")
    catalog_queue: str = Field(default="klaviyo-catalog", description="Queue for catalog sync work")

    # Retry policy
    task_max_attempts: int = Field(default=3, ge=1, description="Attempts per unit of work")
    track_retry_backoff: list[int] = Field(
        default=[60, 300, 900],
        description="Countdown in seconds before each re-delivery of a track unit",
    )
    track_time_limit: int = Field(default=30, ge=1, description="Soft time limit for track units")
    identify_time_limit: int = Field(default=30, ge=1, description="Soft time limit for identify units")
    catalog_time_limit: int = Field(
        default=120,
        ge=1,
        description="Soft time limit for catalog units (many sequential calls)",
    )
    hard_time_limit_grace: int = Field(
        default=15,
        ge=1,
        description="Seconds past the soft limit before the worker process is killed",
    )

    @property
    def broker_url(self) -> str:
        """
        Construct RabbitMQ broker URL.

        Returns:
            str: Celery-compatible broker URL
        """
        return (
            f"amqp://{self.broker_user}:{self.broker_password}"
            f"@{self.broker_host}:{self.broker_port}/{self.broker_vhost}"
        )

    @property
    def result_backend_url(self) -> str:
        """
        Construct Redis result backend URL.

        Returns:
            str: Celery-compatible result backend URL
        """
        return f"redis://{self.result_backend_host}:{self.result_backend_port}/{self.result_backend_db}"

    class Config:
        """Pydantic config."""

        env_prefix = "CELERY_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
