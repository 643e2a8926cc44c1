"""
Observability module.

Provides logging configuration and structured logging helpers.
"""

from klaviyo_bridge.observability.logger import configure_logging

__all__ = ["configure_logging"]
