"""
Exception hierarchy for the Klaviyo bridge.

Provides layered exception structure for dispatch and integration errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class BridgeException(Exception):
    """Base exception for all Klaviyo bridge errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidInputError(BridgeException):
    """Raised when a business precondition fails before any network call."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid input error.

        Args:
            message: Error message
            field: Field name that failed the precondition
            details: Additional context
        """
        self.field = field
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class KlaviyoAPIError(BridgeException):
    """Base exception for failed Klaviyo API calls."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize Klaviyo API error.

        Args:
            message: Error message
            operation: Client operation that failed (track, identify, ...)
            status_code: HTTP status, None for transport-level faults
            response_body: Raw response body, if any
            details: Additional context
        """
        self.operation = operation
        self.status_code = status_code
        self.response_body = response_body
        details = details or {}
        if operation:
            details["operation"] = operation
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class TransientRemoteFailure(KlaviyoAPIError):
    """Raised on 5xx responses and transport faults (retryable)."""

    pass


class PermanentRemoteRejection(KlaviyoAPIError):
    """Raised on 4xx responses that retrying cannot fix."""

    pass


class PermanentJobFailure(BridgeException):
    """Raised when a unit of work has exhausted its retry budget."""

    def __init__(
        self,
        task_name: str,
        attempts: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize permanent job failure.

        Args:
            task_name: Celery task name of the failed unit
            attempts: Number of attempts made
            details: Identifying fields of the originating fact
        """
        details = details or {}
        details["task"] = task_name
        details["attempts"] = attempts
        super().__init__(
            f"Unit of work {task_name} failed permanently after {attempts} attempts",
            details,
        )
