"""
Dependency factories.

Builds Klaviyo clients and actions from settings for workers and callers.

Dependencies: klaviyo_bridge.configs, klaviyo_bridge.boundary
System role: DI container for service construction
"""

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient, KlaviyoTransport
from klaviyo_bridge.configs import Settings, get_settings
from klaviyo_bridge.configs.klaviyo import KlaviyoSettings


def transport_timeout(klaviyo: KlaviyoSettings, time_budget: float | None = None) -> float:
    """
    Per-request timeout that keeps every transport attempt inside a time budget.

    Args:
        klaviyo: Klaviyo settings (timeout, attempts, retry delay)
        time_budget: Seconds available for one call, e.g. a task's soft time limit

    Returns:
        float: Configured timeout, capped so that all attempts plus their
            delays fit in time_budget
    """
    if time_budget is None:
        return klaviyo.timeout
    attempts = klaviyo.transport_max_attempts
    delays = klaviyo.transport_retry_delay * (attempts - 1)
    return min(klaviyo.timeout, max(time_budget - delays, 0.0) / attempts)


def get_klaviyo_transport(
    settings: Settings | None = None,
    time_budget: float | None = None,
) -> KlaviyoTransport:
    """
    Get a Klaviyo transport configured from settings.

    Args:
        settings: Optional settings override (defaults to cached settings)
        time_budget: Optional seconds the transport's retries must fit in

    Returns:
        KlaviyoTransport: New transport owning its own HTTP client
    """
    klaviyo = (settings or get_settings()).klaviyo
    return KlaviyoTransport(
        api_key=klaviyo.api_key,
        api_url=klaviyo.api_url,
        api_version=klaviyo.api_version,
        timeout=transport_timeout(klaviyo, time_budget),
        max_attempts=klaviyo.transport_max_attempts,
        retry_delay=klaviyo.transport_retry_delay,
    )


def get_klaviyo_client(
    settings: Settings | None = None,
    time_budget: float | None = None,
) -> KlaviyoClient:
    """
    Get a Klaviyo client instance.

    Callers own the client and should close it, e.g. `with get_klaviyo_client() as client:`.
    Workers pass their soft time limit as time_budget.

    Returns:
        KlaviyoClient: Client instance
    """
    settings = settings or get_settings()
    return KlaviyoClient(
        transport=get_klaviyo_transport(settings, time_budget),
        catalog_scope=settings.klaviyo.catalog_scope,
        catalog_list=settings.klaviyo.catalog_list,
    )
