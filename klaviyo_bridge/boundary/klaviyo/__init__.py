"""Klaviyo REST API boundary."""

from klaviyo_bridge.boundary.klaviyo.client import CatalogWriteOutcome, KlaviyoClient
from klaviyo_bridge.boundary.klaviyo.transport import KlaviyoTransport

__all__ = ["CatalogWriteOutcome", "KlaviyoClient", "KlaviyoTransport"]
