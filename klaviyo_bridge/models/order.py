"""
Order domain fact.

Orders are never sent as their own resource; they become the property bag of
a 'Placed Order' event.

Dependencies: pydantic
System role: Order-to-event derivation
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Order(BaseModel):
    """Completed shop order."""

    model_config = ConfigDict(frozen=True)

    order_id: int | str
    order_number: str
    total: float
    currency: str = "EUR"
    items: list[dict[str, Any]] = Field(default_factory=list)
    subtotal: float | None = None
    tax: float | None = None
    shipping: float | None = None
    discount: float | None = None
    billing_address: dict[str, Any] | None = None
    shipping_address: dict[str, Any] | None = None
    status: str = "completed"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """Build an order from a validated order-placed payload."""
        fields = {key: value for key, value in data.items() if key in cls.model_fields}
        if fields.get("currency") is None:
            fields.pop("currency", None)
        if fields.get("status") is None:
            fields.pop("status", None)
        return cls.model_validate(fields)

    def to_event_properties(self) -> dict[str, Any]:
        """
        Derive event properties.

        Returns:
            dict: Properties with null and empty values dropped
        """
        properties = {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "value": self.total,
            "currency": self.currency,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "discount": self.discount,
            "items": self.items,
            "item_count": len(self.items),
            "billing_address": self.billing_address,
            "shipping_address": self.shipping_address,
            "status": self.status,
        }
        return {
            key: value
            for key, value in properties.items()
            if value is not None and value != [] and value != {}
        }
