"""
Dispatch service.

Builds domain facts from validated shop payloads and enqueues independent
units of work. Callers only ever get a queued-acceptance receipt; the outcome
of the Klaviyo calls is observable through worker logs.

Dependencies: pydantic, klaviyo_bridge.models, klaviyo_bridge.workers.tasks
System role: Caller-facing entry point of the dispatch engine
"""

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from klaviyo_bridge.core.exceptions import InvalidInputError
from klaviyo_bridge.models import Customer, Event, Order, Product
from klaviyo_bridge.workers.retry_policy import UnitState
from klaviyo_bridge.workers.tasks.identify_customer import (
    identify_customer as identify_customer_task,
)
from klaviyo_bridge.workers.tasks.profile import (
    delete_profile as delete_profile_task,
    update_list_membership as update_list_membership_task,
)
from klaviyo_bridge.workers.tasks.sync_catalog import (
    delete_catalog_item as delete_catalog_item_task,
    sync_catalog as sync_catalog_task,
)
from klaviyo_bridge.workers.tasks.track_event import track_event as track_event_task

logger = logging.getLogger(__name__)

PLACED_ORDER_EVENT = "Placed Order"
VIEWED_PRODUCT_EVENT = "Viewed Product"
MAX_PRODUCTS_PER_UNIT = 100


class DispatchReceipt(BaseModel):
    """Queued-acceptance outcome returned to callers."""

    success: bool = True
    message: str
    count: int | None = Field(default=None, description="Items accepted, for batches")
    task_ids: list[str] = Field(default_factory=list)


class DispatchService:
    """
    Enqueue Klaviyo units of work.

    Every unit is independent: an order, for example, becomes one identify
    unit and one track unit with no completion order between them.
    """

    def track_event(
        self,
        event: str,
        properties: dict[str, Any],
        customer: dict[str, Any] | None = None,
        unique_id: str | None = None,
        once: bool = False,
    ) -> DispatchReceipt:
        """
        Queue a custom event.

        Args:
            event: Metric name
            properties: Event properties
            customer: Optional customer payload
            unique_id: Optional Klaviyo dedup key
            once: Require unique_id (track once)

        Returns:
            DispatchReceipt: Acceptance receipt

        Raises:
            InvalidInputError: If once is set without a unique_id
        """
        if once and not unique_id:
            raise InvalidInputError("Track once requires unique_id", field="unique_id")

        fact = Event.create(event, properties, customer, unique_id=unique_id)
        task_id = self._enqueue_event(fact, once=once)
        return DispatchReceipt(message="Event queued for processing", task_ids=[task_id])

    def track_product_view(
        self,
        product_data: dict[str, Any],
        customer: dict[str, Any] | None = None,
    ) -> DispatchReceipt:
        """Queue a 'Viewed Product' event built from a product payload."""
        product = Product.from_dict(product_data)
        fact = Event.create(VIEWED_PRODUCT_EVENT, product.to_event_properties(), customer)
        task_id = self._enqueue_event(fact)
        return DispatchReceipt(message="Product view event queued", task_ids=[task_id])

    def order_placed(self, order_data: dict[str, Any]) -> DispatchReceipt:
        """
        Queue identification of the buyer and a 'Placed Order' event.

        Args:
            order_data: Validated order payload including 'customer'

        Returns:
            DispatchReceipt: Receipt listing both task ids
        """
        customer_data = order_data.get("customer")
        if not customer_data:
            raise InvalidInputError("Order requires customer data", field="customer")

        customer = Customer.from_dict(customer_data)
        identify_id = identify_customer_task.delay(customer.model_dump(mode="json")).id
        self._log_queued(identify_customer_task.name, identify_id, email=customer.email)

        order = Order.from_dict(order_data)
        fact = Event.create(PLACED_ORDER_EVENT, order.to_event_properties(), customer_data)
        track_id = self._enqueue_event(fact)

        return DispatchReceipt(
            message="Order placed event queued",
            task_ids=[identify_id, track_id],
        )

    def sync_catalog(self, products: Sequence[dict[str, Any]]) -> DispatchReceipt:
        """
        Queue a bulk catalog sync.

        Products are split into units of at most MAX_PRODUCTS_PER_UNIT items.
        """
        facts = [Product.from_dict(product).to_dict() for product in products]
        task_ids = []
        for start in range(0, len(facts), MAX_PRODUCTS_PER_UNIT):
            batch = facts[start:start + MAX_PRODUCTS_PER_UNIT]
            task_id = sync_catalog_task.delay(batch).id
            self._log_queued(sync_catalog_task.name, task_id, product_count=len(batch))
            task_ids.append(task_id)

        return DispatchReceipt(
            message="Catalog sync queued",
            count=len(facts),
            task_ids=task_ids,
        )

    def sync_single_product(self, product_data: dict[str, Any]) -> DispatchReceipt:
        """Queue a catalog sync of one product."""
        fact = Product.from_dict(product_data).to_dict()
        task_id = sync_catalog_task.delay([fact]).id
        self._log_queued(sync_catalog_task.name, task_id, product_id=fact["product_id"])
        return DispatchReceipt(message="Single product sync queued", task_ids=[task_id])

    def delete_product(self, product_id: int | str) -> DispatchReceipt:
        """Queue deletion of a product's catalog item."""
        task_id = delete_catalog_item_task.delay(product_id).id
        self._log_queued(delete_catalog_item_task.name, task_id, product_id=product_id)
        return DispatchReceipt(message="Product deletion queued", task_ids=[task_id])

    def delete_profile(self, email: str) -> DispatchReceipt:
        """Queue a GDPR profile deletion."""
        task_id = delete_profile_task.delay(email).id
        self._log_queued(delete_profile_task.name, task_id, email=email)
        return DispatchReceipt(message="Profile deletion queued", task_ids=[task_id])

    def subscribe_to_list(self, list_id: str, email: str) -> DispatchReceipt:
        """Queue adding a profile to a list."""
        return self._enqueue_list_change(list_id, email, subscribe=True)

    def unsubscribe_from_list(self, list_id: str, email: str) -> DispatchReceipt:
        """Queue removing a profile from a list."""
        return self._enqueue_list_change(list_id, email, subscribe=False)

    def _enqueue_list_change(self, list_id: str, email: str, subscribe: bool) -> DispatchReceipt:
        task_id = update_list_membership_task.delay(list_id, email, subscribe).id
        self._log_queued(update_list_membership_task.name, task_id, email=email, list_id=list_id)
        return DispatchReceipt(message="List membership change queued", task_ids=[task_id])

    def _enqueue_event(self, event: Event, once: bool = False) -> str:
        task_id = track_event_task.delay(event.model_dump(mode="json"), once).id
        self._log_queued(
            track_event_task.name,
            task_id,
            event=event.name,
            email=event.customer.email if event.customer else None,
        )
        return task_id

    def _log_queued(self, task_name: str, task_id: str, **fact_fields: Any) -> None:
        logger.info(
            f"{task_name} {UnitState.QUEUED.value}: {task_id}",
            extra={"task_id": task_id, **fact_fields},
        )
