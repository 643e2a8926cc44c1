"""
Event domain fact.

A named behavioral event with its properties, optional customer and optional
server-side dedup key.

Dependencies: pydantic
System role: Metric/event payloads
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from klaviyo_bridge.models.customer import Customer


class Event(BaseModel):
    """Behavioral event relayed to Klaviyo as a metric occurrence."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Metric name, e.g. 'Placed Order'")
    properties: dict[str, Any] = Field(default_factory=dict)
    customer: Customer | None = None
    time: datetime | None = None
    unique_id: str | None = Field(
        default=None,
        description="Dedup key honoured by Klaviyo, not checked locally",
    )

    @classmethod
    def create(
        cls,
        name: str,
        properties: dict[str, Any],
        customer_data: dict[str, Any] | None = None,
        unique_id: str | None = None,
    ) -> "Event":
        """
        Build an event stamped with the current time.

        Args:
            name: Metric name
            properties: Event properties
            customer_data: Optional customer payload
            unique_id: Optional dedup key

        Returns:
            Event: New event
        """
        return cls(
            name=name,
            properties=properties,
            customer=Customer.from_dict(customer_data) if customer_data else None,
            time=datetime.now(timezone.utc),
            unique_id=unique_id,
        )

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON:API body for POST /events/."""
        attributes: dict[str, Any] = {
            "metric": {"name": self.name},
            "properties": self.properties,
            "time": (self.time or datetime.now(timezone.utc)).isoformat(),
        }
        if self.customer is not None:
            attributes["profile"] = self.customer.to_profile_attributes()
        if self.unique_id:
            attributes["unique_id"] = self.unique_id

        return {"data": {"type": "event", "attributes": attributes}}
