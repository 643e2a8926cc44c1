"""
Logger configuration.

Configures root logging for API processes and Celery workers, and redacts the
Klaviyo API key from log records.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import re
import sys

_API_KEY_PATTERN = re.compile(r"(Klaviyo-API-Key\s+)[A-Za-z0-9_-]+")
_PRIVATE_KEY_PATTERN = re.compile(r"\bpk_[A-Za-z0-9]{8,}\b")


class SensitiveDataFilter(logging.Filter):
    """Filter to redact Klaviyo credentials from logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            msg = _API_KEY_PATTERN.sub(r"\1[REDACTED]", record.msg)
            record.msg = _PRIVATE_KEY_PATTERN.sub("[REDACTED]", msg)
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    Args:
        level: Root log level name
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.addFilter(SensitiveDataFilter())

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    # Reduce noise from verbose third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("amqp").setLevel(logging.WARNING)

