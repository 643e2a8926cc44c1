"""
Delete profile action.

Dependencies: klaviyo_bridge.boundary.klaviyo
System role: GDPR profile deletion use case
"""

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient


class DeleteProfileAction:
    """Request deletion of a profile. Returns False when no profile matches."""

    def __init__(self, klaviyo: KlaviyoClient) -> None:
        self.klaviyo = klaviyo

    def execute(self, email: str) -> bool:
        return self.klaviyo.delete_profile(email)
