"""
Test suite for Klaviyo use-case actions.

Uses a mocked KlaviyoClient; verifies each action delegates to the right
client operation and enforces its own preconditions.

System role: Verification of the application action layer
"""

from unittest.mock import MagicMock

import pytest

from klaviyo_bridge.application.actions import (
    DeleteProfileAction,
    IdentifyCustomerAction,
    ListMembershipAction,
    SyncCatalogAction,
    TrackEventAction,
)
from klaviyo_bridge.core.exceptions import InvalidInputError
from klaviyo_bridge.models import BulkItemError, BulkResult, Customer, Event, Product


class TestTrackEventAction:
    """Test suite for TrackEventAction."""

    def test_execute_should_track_event(self, mock_klaviyo_client: MagicMock) -> None:
        """Test execute forwards the event to KlaviyoClient.track."""
        # Arrange
        mock_klaviyo_client.track.return_value = True
        event = Event.create("Ping", {})

        # Act
        result = TrackEventAction(mock_klaviyo_client).execute(event)

        # Assert
        assert result is True
        mock_klaviyo_client.track.assert_called_once_with(event)

    def test_execute_once_should_require_unique_id(self, mock_klaviyo_client: MagicMock) -> None:
        """Test execute_once rejects events without unique_id before any call."""
        with pytest.raises(InvalidInputError) as exc_info:
            TrackEventAction(mock_klaviyo_client).execute_once(Event.create("Ping", {}))

        assert exc_info.value.field == "unique_id"
        mock_klaviyo_client.track_once.assert_not_called()
        mock_klaviyo_client.track.assert_not_called()

    def test_execute_once_should_use_track_once(self, mock_klaviyo_client: MagicMock) -> None:
        """Test execute_once delegates to KlaviyoClient.track_once."""
        event = Event.create("Ping", {}, unique_id="u-1")

        TrackEventAction(mock_klaviyo_client).execute_once(event)

        mock_klaviyo_client.track_once.assert_called_once_with(event)


class TestIdentifyCustomerAction:
    """Test suite for IdentifyCustomerAction."""

    def test_execute_from_dict_should_build_customer(
        self, mock_klaviyo_client: MagicMock, customer_data: dict
    ) -> None:
        """Test execute_from_dict validates the payload into a Customer."""
        IdentifyCustomerAction(mock_klaviyo_client).execute_from_dict(customer_data)

        mock_klaviyo_client.identify.assert_called_once_with(Customer.from_dict(customer_data))


class TestSyncCatalogAction:
    """Test suite for SyncCatalogAction."""

    def test_sync_bulk_should_return_client_result_unchanged(
        self, mock_klaviyo_client: MagicMock, product_data: dict
    ) -> None:
        """Test sync_bulk passes the client's BulkResult straight through."""
        # Arrange
        expected = BulkResult(
            success=1,
            failed=1,
            errors=[BulkItemError(product_id="7", error="rejected")],
        )
        mock_klaviyo_client.bulk_upsert_catalog.return_value = expected

        # Act
        result = SyncCatalogAction(mock_klaviyo_client).sync_bulk([product_data, {"product_id": 7}])

        # Assert
        assert result is expected

    def test_sync_from_dict_should_upsert_product(
        self, mock_klaviyo_client: MagicMock, product_data: dict
    ) -> None:
        """Test sync_from_dict upserts the validated product."""
        SyncCatalogAction(mock_klaviyo_client).sync_from_dict(product_data)

        mock_klaviyo_client.upsert_catalog_item.assert_called_once_with(
            Product.from_dict(product_data)
        )

    def test_delete_should_delete_catalog_item(self, mock_klaviyo_client: MagicMock) -> None:
        """Test delete addresses the item by product id."""
        SyncCatalogAction(mock_klaviyo_client).delete(42)

        mock_klaviyo_client.delete_catalog_item.assert_called_once_with(42)


class TestProfileActions:
    """Test suite for DeleteProfileAction and ListMembershipAction."""

    def test_delete_profile_should_report_missing_profile(
        self, mock_klaviyo_client: MagicMock
    ) -> None:
        """Test a missing profile surfaces as False, not an error."""
        mock_klaviyo_client.delete_profile.return_value = False

        assert DeleteProfileAction(mock_klaviyo_client).execute("ghost@b.com") is False

    def test_list_membership_should_delegate(self, mock_klaviyo_client: MagicMock) -> None:
        """Test add and remove map to the matching client calls."""
        action = ListMembershipAction(mock_klaviyo_client)

        action.add("LIST1", "a@b.com")
        action.remove("LIST1", "a@b.com")

        mock_klaviyo_client.add_to_list.assert_called_once_with("LIST1", "a@b.com")
        mock_klaviyo_client.remove_from_list.assert_called_once_with("LIST1", "a@b.com")
