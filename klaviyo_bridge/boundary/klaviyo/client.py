"""
Klaviyo API client.

Executes one logical operation (identify, track, catalog upsert, profile
deletion, list membership) as one or more HTTP calls through KlaviyoTransport.

Remote failures raise KlaviyoAPIError subclasses; business outcomes such as
"no profile for this email" return False.

Dependencies: httpx, pydantic, klaviyo_bridge.models
System role: Integration client for the Klaviyo REST API
"""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from klaviyo_bridge.boundary.klaviyo.transport import KlaviyoTransport
from klaviyo_bridge.core.exceptions import (
    BridgeException,
    InvalidInputError,
    PermanentRemoteRejection,
)
from klaviyo_bridge.models import (
    BulkItemError,
    BulkResult,
    Customer,
    Event,
    Product,
    build_catalog_item_id,
)
from klaviyo_bridge.models.product import DEFAULT_CATALOG_LIST, DEFAULT_CATALOG_SCOPE

logger = logging.getLogger(__name__)

# Characters that would terminate or escape the quoted value of equals(email,"...")
FILTER_UNSAFE_CHARS = ('"', "\\")


class CatalogWriteOutcome(str, Enum):
    """Result of the create step of a catalog upsert."""

    CREATED = "created"
    CONFLICT = "conflict"


class KlaviyoClient:
    """
    Client for the Klaviyo REST API.

    Stateless apart from the transport it owns. Use as a context manager so the
    HTTP connection pool is released after a unit of work.
    """

    def __init__(
        self,
        transport: KlaviyoTransport,
        catalog_scope: str = DEFAULT_CATALOG_SCOPE,
        catalog_list: str = DEFAULT_CATALOG_LIST,
    ) -> None:
        """
        Initialize Klaviyo client.

        Args:
            transport: Configured Klaviyo transport
            catalog_scope: First part of catalog item composite ids
            catalog_list: Second part of catalog item composite ids
        """
        self._transport = transport
        self._catalog_scope = catalog_scope
        self._catalog_list = catalog_list

    def __enter__(self) -> "KlaviyoClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying transport."""
        self._transport.close()

    # Event tracking

    def track(self, event: Event) -> bool:
        """
        Submit an event occurrence.

        A unique_id, when present, is forwarded for server-side dedup.

        Args:
            event: Event to track

        Returns:
            bool: True on success

        Raises:
            KlaviyoAPIError: If Klaviyo rejects the event or stays unreachable
        """
        response = self._transport.request(
            "POST", "/events/", operation="track", payload=event.to_payload()
        )
        self._ensure_success(response, "track", event.name)
        logger.info(
            f"Klaviyo event tracked: {event.name}",
            extra={"event": event.name, "has_customer": event.customer is not None},
        )
        return True

    def track_once(self, event: Event) -> bool:
        """
        Track an event that Klaviyo must deduplicate by unique_id.

        Raises:
            InvalidInputError: If the event has no unique_id (no call is made)
        """
        if not event.unique_id:
            raise InvalidInputError("track_once requires unique_id", field="unique_id")
        return self.track(event)

    # Profiles

    def identify(self, customer: Customer) -> bool:
        """
        Create or merge a profile keyed by email.

        Args:
            customer: Customer to identify

        Returns:
            bool: True on success
        """
        payload = {
            "data": {
                "type": "profile",
                "attributes": customer.to_profile_attributes(),
            }
        }
        response = self._transport.request(
            "POST", "/profiles/", operation="identify", payload=payload
        )
        self._ensure_success(response, "identify", customer.email)
        logger.info("Klaviyo customer identified", extra={"email": customer.email})
        return True

    def update_profile(self, profile_id: str, attributes: dict[str, Any]) -> bool:
        """Patch attributes of an existing profile."""
        payload = {
            "data": {
                "type": "profile",
                "id": profile_id,
                "attributes": attributes,
            }
        }
        response = self._transport.request(
            "PATCH",
            f"/profiles/{profile_id}/",
            operation="update_profile",
            payload=payload,
        )
        self._ensure_success(response, "update_profile", profile_id)
        return True

    def find_profile_id(self, email: str) -> str | None:
        """
        Resolve a profile id with an email-filtered lookup.

        Args:
            email: Profile email

        Returns:
            str | None: Profile id, or None if no profile matches

        Raises:
            InvalidInputError: If the email cannot be quoted in a filter
                expression (contains '"' or '\\'); no call is made
        """
        if any(char in email for char in FILTER_UNSAFE_CHARS):
            raise InvalidInputError(
                "Email contains characters not allowed in a profile filter",
                field="email",
            )
        response = self._transport.request(
            "GET",
            "/profiles/",
            operation="find_profile",
            params={"filter": f'equals(email,"{email}")'},
        )
        self._ensure_success(response, "find_profile", email)
        profiles = response.json().get("data") or []
        if not profiles:
            return None
        return profiles[0].get("id")

    def delete_profile(self, email: str) -> bool:
        """
        Request GDPR deletion of the profile with this email.

        Returns:
            bool: True if deletion was requested, False if no profile exists
        """
        profile_id = self.find_profile_id(email)
        if not profile_id:
            logger.warning("Profile not found for deletion", extra={"email": email})
            return False

        payload = {
            "data": {
                "type": "data-privacy-deletion-job",
                "attributes": {
                    "profile": {"data": {"type": "profile", "id": profile_id}},
                },
            }
        }
        response = self._transport.request(
            "POST",
            "/data-privacy-deletion-jobs/",
            operation="delete_profile",
            payload=payload,
        )
        self._ensure_success(response, "delete_profile", email)
        logger.info(
            "Klaviyo profile deletion requested",
            extra={"email": email, "profile_id": profile_id},
        )
        return True

    # Lists

    def add_to_list(self, list_id: str, email: str) -> bool:
        """Add the profile with this email to a list. False if no profile exists."""
        return self._change_list_membership("POST", list_id, email)

    def remove_from_list(self, list_id: str, email: str) -> bool:
        """Remove the profile with this email from a list. False if no profile exists."""
        return self._change_list_membership("DELETE", list_id, email)

    def _change_list_membership(self, method: str, list_id: str, email: str) -> bool:
        operation = "add_to_list" if method == "POST" else "remove_from_list"
        profile_id = self.find_profile_id(email)
        if not profile_id:
            logger.warning(
                f"Profile not found for {operation}",
                extra={"email": email, "list_id": list_id},
            )
            return False

        response = self._transport.request(
            method,
            f"/lists/{list_id}/relationships/profiles/",
            operation=operation,
            payload={"data": [{"type": "profile", "id": profile_id}]},
        )
        self._ensure_success(response, operation, email)
        return True

    # Catalog

    def catalog_item_id(self, product_id: int | str) -> str:
        """Composite id of a product's catalog item."""
        return build_catalog_item_id(product_id, self._catalog_scope, self._catalog_list)

    def create_or_detect_conflict(self, product: Product) -> CatalogWriteOutcome:
        """
        First step of a catalog upsert: try to create the item.

        Klaviyo has no native upsert. A 409 means the item already exists and
        is reported as CONFLICT instead of an error.

        Returns:
            CatalogWriteOutcome: CREATED or CONFLICT

        Raises:
            KlaviyoAPIError: For any other failure
        """
        payload = {"data": product.to_catalog_item(self._catalog_scope, self._catalog_list)}
        response = self._transport.request(
            "POST", "/catalog-items/", operation="create_catalog_item", payload=payload
        )
        if response.status_code == httpx.codes.CONFLICT:
            return CatalogWriteOutcome.CONFLICT
        self._ensure_success(response, "create_catalog_item", str(product.id))
        return CatalogWriteOutcome.CREATED

    def upsert_catalog_item(self, product: Product) -> bool:
        """
        Create a catalog item, falling back to an update on conflict.

        Returns:
            bool: True when the item was created or updated
        """
        outcome = self.create_or_detect_conflict(product)
        if outcome is CatalogWriteOutcome.CONFLICT:
            logger.debug(f"Catalog item {product.id} exists, updating")
            return self.update_catalog_item(product)
        return True

    def update_catalog_item(self, product: Product) -> bool:
        """Patch a catalog item addressed by its composite id."""
        catalog_id = self.catalog_item_id(product.id)
        payload = {
            "data": {
                "type": "catalog-item",
                "id": catalog_id,
                "attributes": product.to_catalog_attributes(),
            }
        }
        response = self._transport.request(
            "PATCH",
            f"/catalog-items/{catalog_id}/",
            operation="update_catalog_item",
            payload=payload,
        )
        self._ensure_success(response, "update_catalog_item", str(product.id))
        return True

    def delete_catalog_item(self, product_id: int | str) -> bool:
        """Delete a catalog item addressed by its composite id."""
        catalog_id = self.catalog_item_id(product_id)
        response = self._transport.request(
            "DELETE", f"/catalog-items/{catalog_id}/", operation="delete_catalog_item"
        )
        self._ensure_success(response, "delete_catalog_item", str(product_id))
        return True

    def bulk_upsert_catalog(
        self, products: Iterable[Product | Mapping[str, Any]]
    ) -> BulkResult:
        """
        Upsert products one at a time, accumulating per-item failures.

        A failing item is recorded with its source id and error message and
        never stops the remaining items. Raw mappings are converted inside the
        per-item guard so a malformed item counts as a failure too.

        Args:
            products: Products or raw shop product payloads

        Returns:
            BulkResult: Success/failure counts and ordered error records
        """
        result = BulkResult()
        for item in products:
            source_id = _source_id(item)
            try:
                product = item if isinstance(item, Product) else Product.from_dict(dict(item))
                self.upsert_catalog_item(product)
            except (BridgeException, ValidationError) as e:
                logger.warning(f"Catalog item {source_id} failed: {e}")
                result.failed += 1
                result.errors.append(BulkItemError(product_id=source_id, error=str(e)))
            else:
                result.success += 1
        return result

    # Metrics

    def get_metrics(self) -> dict[str, Any]:
        """List metrics. Empty dict on failure."""
        response = self._transport.request("GET", "/metrics/", operation="get_metrics")
        return response.json() if response.is_success else {}

    def get_metric(self, metric_id: str) -> dict[str, Any] | None:
        """Fetch one metric. None on failure."""
        response = self._transport.request(
            "GET", f"/metrics/{metric_id}/", operation="get_metric"
        )
        return response.json() if response.is_success else None

    def _ensure_success(self, response: httpx.Response, operation: str, context: str) -> None:
        """Raise PermanentRemoteRejection for a non-2xx response below 500."""
        if response.is_success:
            return
        logger.error(
            f"Klaviyo API error: {operation} failed with status {response.status_code}",
            extra={
                "operation": operation,
                "context": context,
                "status": response.status_code,
                "body": response.text,
            },
        )
        raise PermanentRemoteRejection(
            f"Klaviyo API {operation} failed with status {response.status_code}: {response.text}",
            operation=operation,
            status_code=response.status_code,
            response_body=response.text,
            details={"context": context},
        )


def _source_id(item: Product | Mapping[str, Any]) -> str:
    if isinstance(item, Product):
        return str(item.id)
    product_id = item.get("product_id")
    return "unknown" if product_id is None else str(product_id)
