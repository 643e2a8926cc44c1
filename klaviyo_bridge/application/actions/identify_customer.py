"""
Identify customer action.

Dependencies: klaviyo_bridge.boundary.klaviyo, klaviyo_bridge.models
System role: Profile identification use case
"""

from typing import Any

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient
from klaviyo_bridge.models import Customer


class IdentifyCustomerAction:
    """Create or merge a Klaviyo profile for a customer."""

    def __init__(self, klaviyo: KlaviyoClient) -> None:
        self.klaviyo = klaviyo

    def execute(self, customer: Customer) -> bool:
        return self.klaviyo.identify(customer)

    def execute_from_dict(self, customer_data: dict[str, Any]) -> bool:
        """Build the customer from a validated payload, then identify it."""
        return self.execute(Customer.from_dict(customer_data))
