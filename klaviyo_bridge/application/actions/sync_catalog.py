"""
Catalog sync action.

Single-item and bulk catalog upserts. The bulk summary is returned exactly as
the client produced it.

Dependencies: klaviyo_bridge.boundary.klaviyo, klaviyo_bridge.models
System role: Catalog synchronization use case
"""

from collections.abc import Iterable, Mapping
from typing import Any

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient
from klaviyo_bridge.models import BulkResult, Product


class SyncCatalogAction:
    """Keep Klaviyo catalog items in line with shop products."""

    def __init__(self, klaviyo: KlaviyoClient) -> None:
        self.klaviyo = klaviyo

    def sync_single(self, product: Product) -> bool:
        return self.klaviyo.upsert_catalog_item(product)

    def sync_bulk(self, products: Iterable[Product | Mapping[str, Any]]) -> BulkResult:
        return self.klaviyo.bulk_upsert_catalog(products)

    def sync_from_dict(self, product_data: dict[str, Any]) -> bool:
        return self.sync_single(Product.from_dict(product_data))

    def delete(self, product_id: int | str) -> bool:
        return self.klaviyo.delete_catalog_item(product_id)
