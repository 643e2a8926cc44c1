"""
Klaviyo HTTP transport.

Single point of outbound HTTP I/O: sets credentials and the API revision
header, applies the request timeout, and retries server-side faults.
Only 5xx responses and transport errors are retried; anything below 500 is
handed back to the client for classification.

Dependencies: httpx, tenacity
System role: Transport-level resilience for the Klaviyo client
"""

import logging
from typing import Any

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from klaviyo_bridge.configs.klaviyo import KLAVIYO_API_REVISION
from klaviyo_bridge.core.exceptions import InvalidInputError, TransientRemoteFailure

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PATCH", "DELETE"})


class KlaviyoTransport:
    """
    HTTP transport for the Klaviyo REST API.

    Owns one httpx.Client; use as a context manager or call close().
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://a.klaviyo.com/api",
        api_version: str = KLAVIYO_API_REVISION,
        timeout: float = 30.0,
        max_attempts: int = 2,
        retry_delay: float = 0.1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize Klaviyo transport.

        Args:
            api_key: Klaviyo private API key
            api_url: API base URL
            api_version: Value of the 'revision' header
            timeout: Request timeout in seconds
            max_attempts: Total attempts per call for retryable faults
            retry_delay: Fixed delay between attempts in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not api_key:
            logger.warning(
                f"{__name__}:__init__ - KLAVIYO_API_KEY is empty, "
                "every Klaviyo call will be rejected"
            )
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._client = httpx.Client(
            base_url=api_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Klaviyo-API-Key {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "revision": api_version,
            },
        )

    def __enter__(self) -> "KlaviyoTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        payload: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Send a request, retrying 5xx responses and transport faults.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: Endpoint path relative to the API base URL
            operation: Client operation name, for logs and errors
            payload: JSON body
            params: Query parameters

        Returns:
            httpx.Response: Final response with status below 500

        Raises:
            InvalidInputError: If the method is not supported
            TransientRemoteFailure: After the attempt budget is exhausted
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise InvalidInputError(f"Unsupported HTTP method: {method}", field="method")

        retrying = Retrying(
            retry=retry_if_exception_type(TransientRemoteFailure),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._retry_delay),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:request - {operation} retry "
                f"{retry_state.attempt_number}/{self._max_attempts} after "
                f"{retry_state.outcome.exception()}"
            ),
            reraise=True,
        )
        return retrying(self._send_once, method, path, operation, payload, params)

    def _send_once(
        self,
        method: str,
        path: str,
        operation: str,
        payload: Any,
        params: dict[str, str] | None,
    ) -> httpx.Response:
        """Perform one HTTP attempt and classify server-side faults."""
        try:
            response = self._client.request(method, path, json=payload, params=params)
        except httpx.TransportError as e:
            raise TransientRemoteFailure(
                f"Klaviyo {operation} transport error: {e}",
                operation=operation,
            ) from e

        if response.status_code >= 500:
            raise TransientRemoteFailure(
                f"Klaviyo {operation} failed with status {response.status_code}",
                operation=operation,
                status_code=response.status_code,
                response_body=response.text,
            )
        return response
