"""
Shared test fixtures and configuration for entire test suite.

Provides: fake Klaviyo HTTP endpoint (httpx.MockTransport), sample shop payloads,
mocked Klaviyo clients
Dependencies: pytest, httpx
System role: Test infrastructure and fixture management
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient, KlaviyoTransport

ResponseSpec = tuple[int, Any] | Exception | Callable[[httpx.Request], Any]


class RecordingHandler:
    """
    MockTransport handler that records requests and replays responses.

    Responses are consumed in order; the last one repeats. Each entry is a
    (status, json_body) tuple, an exception to raise, or a callable receiving
    the request and returning one of those.
    """

    def __init__(self, responses: list[ResponseSpec]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        spec = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if callable(spec) and not isinstance(spec, Exception):
            spec = spec(request)
        if isinstance(spec, Exception):
            raise spec
        status, body = spec
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(method, path) of every recorded request."""
        return [(request.method, request.url.path) for request in self.requests]


@pytest.fixture
def klaviyo_factory() -> Callable[..., tuple[KlaviyoClient, RecordingHandler]]:
    """
    Build a KlaviyoClient wired to a recording fake endpoint.

    Usage:
        client, handler = klaviyo_factory((201, {}), max_attempts=3)
    """
    clients: list[KlaviyoClient] = []

    def _make(*responses: ResponseSpec, max_attempts: int = 2) -> tuple[KlaviyoClient, RecordingHandler]:
        handler = RecordingHandler(list(responses) or [(200, {})])
        transport = KlaviyoTransport(
            api_key="pk_test_0123456789",
            api_url="https://a.klaviyo.com/api",
            max_attempts=max_attempts,
            retry_delay=0,
            transport=httpx.MockTransport(handler),
        )
        client = KlaviyoClient(transport)
        clients.append(client)
        return client, handler

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def mock_klaviyo_client() -> MagicMock:
    """
    Create mock KlaviyoClient usable as a context manager.

    Returns:
        MagicMock: Mocked client whose __enter__ returns itself
    """
    client = MagicMock(spec=KlaviyoClient)
    client.__enter__.return_value = client
    return client


@pytest.fixture
def customer_data() -> dict[str, Any]:
    """Validated customer payload."""
    return {
        "email": "a@b.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "properties": {"loyalty_tier": "gold"},
    }


@pytest.fixture
def product_data() -> dict[str, Any]:
    """Validated shop product payload."""
    return {
        "product_id": 42,
        "product_name": "Espresso Cup",
        "price": 12.5,
        "currency": "EUR",
        "product_url": "https://shop.example.com/p/42",
        "image_url": "https://shop.example.com/img/42.jpg",
        "description": "Porcelain cup",
        "categories": ["kitchen", "cups"],
        "sku": "CUP-42",
        "custom_attributes": {"color": "white"},
    }


@pytest.fixture
def order_data() -> dict[str, Any]:
    """Validated order-placed payload with a single line item."""
    return {
        "order_id": 1001,
        "order_number": "000001001",
        "total": 25.0,
        "currency": "EUR",
        "items": [
            {"product_id": 42, "product_name": "Espresso Cup", "quantity": 2, "price": 12.5},
        ],
        "tax": 4.5,
        "customer": {"email": "a@b.com"},
    }
