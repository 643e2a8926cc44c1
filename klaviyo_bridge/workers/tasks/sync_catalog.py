"""
Catalog sync Celery tasks.

Async tasks:
- sync_catalog(products): bulk upsert, one item at a time, partial failures
  recorded in the returned summary
- delete_catalog_item(product_id)

Dependencies: klaviyo_bridge.application, klaviyo_bridge.workers
System role: Async catalog synchronization tasks
"""

import logging
from typing import Any

from klaviyo_bridge.application.actions import SyncCatalogAction
from klaviyo_bridge.dependencies import get_klaviyo_client
from klaviyo_bridge.workers import celery_app, celery_config
from klaviyo_bridge.workers.dispatch_task import DispatchTask
from klaviyo_bridge.workers.retry_policy import catalog_policy

logger = logging.getLogger(__name__)

CATALOG_POLICY = catalog_policy(celery_config)


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.sync_catalog",
    retry_policy=CATALOG_POLICY,
    max_retries=CATALOG_POLICY.max_retries,
    soft_time_limit=CATALOG_POLICY.soft_time_limit,
    time_limit=CATALOG_POLICY.time_limit,
)
def sync_catalog(self, products: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Upsert a batch of products into the Klaviyo catalog.

    Args:
        products: Shop product payloads

    Returns:
        dict: BulkResult summary (success, failed, errors)
    """
    def work() -> dict[str, Any]:
        with get_klaviyo_client(time_budget=CATALOG_POLICY.soft_time_limit) as client:
            result = SyncCatalogAction(client).sync_bulk(products)
        logger.info(
            f"Catalog sync completed: {result.success} succeeded, {result.failed} failed",
            extra={"success": result.success, "failed": result.failed},
        )
        return result.model_dump()

    return self.run_unit(
        work,
        product_count=len(products),
        product_ids=[product.get("product_id") for product in products],
    )


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.delete_catalog_item",
    retry_policy=CATALOG_POLICY,
    max_retries=CATALOG_POLICY.max_retries,
    soft_time_limit=CATALOG_POLICY.soft_time_limit,
    time_limit=CATALOG_POLICY.time_limit,
)
def delete_catalog_item(self, product_id: int | str) -> bool:
    """Delete one product's catalog item."""
    def work() -> bool:
        with get_klaviyo_client(time_budget=CATALOG_POLICY.soft_time_limit) as client:
            return SyncCatalogAction(client).delete(product_id)

    return self.run_unit(work, product_id=product_id)
