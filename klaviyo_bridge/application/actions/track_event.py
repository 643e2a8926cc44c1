"""
Track event action.

Dependencies: klaviyo_bridge.boundary.klaviyo, klaviyo_bridge.models
System role: Event tracking use case
"""

from klaviyo_bridge.boundary.klaviyo import KlaviyoClient
from klaviyo_bridge.core.exceptions import InvalidInputError
from klaviyo_bridge.models import Event


class TrackEventAction:
    """Track an event, optionally as a deduplicated one-off."""

    def __init__(self, klaviyo: KlaviyoClient) -> None:
        self.klaviyo = klaviyo

    def execute(self, event: Event) -> bool:
        return self.klaviyo.track(event)

    def execute_once(self, event: Event) -> bool:
        """
        Track an event that Klaviyo deduplicates by unique_id.

        Raises:
            InvalidInputError: If the event has no unique_id
        """
        if not event.unique_id:
            raise InvalidInputError(
                "Event must have unique_id for track once", field="unique_id"
            )
        return self.klaviyo.track_once(event)
