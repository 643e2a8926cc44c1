"""Unit tests for domain facts and their Klaviyo wire forms."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from klaviyo_bridge.models import (
    BulkResult,
    Customer,
    Event,
    Order,
    Product,
    build_catalog_item_id,
)


class TestCustomer:
    """Test suite for Customer."""

    def test_profile_attributes_drop_missing_fields_and_merge_properties(self, customer_data):
        customer = Customer.from_dict(customer_data)

        assert customer.to_profile_attributes() == {
            "email": "a@b.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "loyalty_tier": "gold",
        }

    def test_properties_override_named_fields(self):
        customer = Customer(email="a@b.com", first_name="Ada", properties={"first_name": "A."})

        assert customer.to_profile_attributes()["first_name"] == "A."

    def test_null_properties_become_empty(self):
        customer = Customer.from_dict({"email": "a@b.com", "properties": None})

        assert customer.properties == {}

    def test_email_is_required(self):
        with pytest.raises(ValidationError):
            Customer(email="")

    def test_customer_is_immutable(self):
        customer = Customer(email="a@b.com")

        with pytest.raises(ValidationError):
            customer.email = "c@d.com"


class TestEvent:
    """Test suite for Event."""

    def test_create_stamps_time_and_builds_customer(self):
        event = Event.create("Viewed Product", {"product_id": 1}, {"email": "a@b.com"})

        assert event.time is not None
        assert event.time.tzinfo is not None
        assert event.customer == Customer(email="a@b.com")
        assert event.unique_id is None

    def test_payload_shape(self):
        time = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        event = Event(
            name="Placed Order",
            properties={"value": 10.0},
            customer=Customer(email="a@b.com"),
            time=time,
            unique_id="order-1",
        )

        assert event.to_payload() == {
            "data": {
                "type": "event",
                "attributes": {
                    "metric": {"name": "Placed Order"},
                    "properties": {"value": 10.0},
                    "time": "2024-05-01T12:00:00+00:00",
                    "profile": {"email": "a@b.com"},
                    "unique_id": "order-1",
                },
            }
        }

    def test_payload_without_customer_or_unique_id(self):
        event = Event(name="Ping", properties={})

        attributes = event.to_payload()["data"]["attributes"]

        assert "profile" not in attributes
        assert "unique_id" not in attributes
        assert attributes["time"]

    def test_json_form_rebuilds_equal_event(self):
        event = Event.create("Ping", {"a": 1}, {"email": "a@b.com"}, unique_id="u-1")

        assert Event.model_validate(event.model_dump(mode="json")) == event


class TestOrder:
    """Test suite for Order."""

    def test_event_properties_from_order(self, order_data):
        order = Order.from_dict(order_data)

        properties = order.to_event_properties()

        assert properties["order_id"] == 1001
        assert properties["value"] == 25.0
        assert properties["item_count"] == 1
        assert properties["tax"] == 4.5
        assert properties["status"] == "completed"
        assert "subtotal" not in properties
        assert "billing_address" not in properties

    def test_defaults_when_payload_sends_nulls(self):
        order = Order.from_dict(
            {"order_id": "A1", "order_number": "1", "total": "9.90", "currency": None, "status": None}
        )

        assert order.currency == "EUR"
        assert order.status == "completed"
        assert order.total == pytest.approx(9.9)
        assert "items" not in order.to_event_properties()
        assert order.to_event_properties()["item_count"] == 0


class TestProduct:
    """Test suite for Product."""

    def test_from_dict_maps_shop_field_names(self, product_data):
        product = Product.from_dict(product_data)

        assert product.id == 42
        assert product.title == "Espresso Cup"
        assert product.url == "https://shop.example.com/p/42"

    def test_event_properties(self, product_data):
        product = Product.from_dict(product_data)

        assert product.to_event_properties() == {
            "product_id": 42,
            "product_name": "Espresso Cup",
            "price": 12.5,
            "currency": "EUR",
            "product_url": "https://shop.example.com/p/42",
            "image_url": "https://shop.example.com/img/42.jpg",
            "categories": ["kitchen", "cups"],
            "sku": "CUP-42",
        }

    def test_catalog_item(self, product_data):
        product = Product.from_dict(product_data)

        item = product.to_catalog_item()

        assert item["type"] == "catalog-item"
        assert item["id"] == "$custom:::$default:::42"
        assert item["attributes"]["external_id"] == "42"
        assert item["attributes"]["image_full_url"] == "https://shop.example.com/img/42.jpg"
        assert item["attributes"]["published"] is True
        assert item["attributes"]["custom_metadata"] == {
            "currency": "EUR",
            "categories": ["kitchen", "cups"],
            "sku": "CUP-42",
            "color": "white",
        }

    def test_catalog_item_omits_missing_optional_attributes(self):
        product = Product.from_dict({"product_id": "sku-9", "product_name": "Mug", "price": 5})

        attributes = product.to_catalog_attributes()

        assert "url" not in attributes
        assert "description" not in attributes
        assert product.catalog_item_id("$custom", "spring") == "$custom:::spring:::sku-9"

    def test_to_dict_uses_shop_field_names(self, product_data):
        product = Product.from_dict(product_data)

        assert Product.from_dict(product.to_dict()) == product
        assert product.to_dict()["product_name"] == "Espresso Cup"


def test_build_catalog_item_id():
    assert build_catalog_item_id(7) == "$custom:::$default:::7"
    assert build_catalog_item_id("x", "scope", "list") == "scope:::list:::x"


def test_bulk_result_total():
    assert BulkResult(success=2, failed=1).total == 3
