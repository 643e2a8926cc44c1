"""
List membership action.

Dependencies: klaviyo_bridge.boundary.klaviyo
System role: List subscription use case
"""

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient


class ListMembershipAction:
    """Add or remove a profile, found by email, to or from a Klaviyo list."""

    def __init__(self, klaviyo: KlaviyoClient) -> None:
        self.klaviyo = klaviyo

    def add(self, list_id: str, email: str) -> bool:
        return self.klaviyo.add_to_list(list_id, email)

    def remove(self, list_id: str, email: str) -> bool:
        return self.klaviyo.remove_from_list(list_id, email)
