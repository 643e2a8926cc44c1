"""Domain facts relayed to Klaviyo."""

from klaviyo_bridge.models.bulk_result import BulkItemError, BulkResult
from klaviyo_bridge.models.customer import Customer
from klaviyo_bridge.models.event import Event
from klaviyo_bridge.models.order import Order
from klaviyo_bridge.models.product import Product, build_catalog_item_id

__all__ = [
    "BulkItemError",
    "BulkResult",
    "Customer",
    "Event",
    "Order",
    "Product",
    "build_catalog_item_id",
]
