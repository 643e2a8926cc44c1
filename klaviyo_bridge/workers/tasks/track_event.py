"""
Track event Celery task.

Async task: track_event(event_data, once)
Flow: rebuild Event -> TrackEventAction -> Klaviyo POST /events/

Retries with the extended 60s/300s/900s schedule.

Dependencies: klaviyo_bridge.application, klaviyo_bridge.workers
System role: Async event tracking task
"""

from typing import Any

from klaviyo_bridge.application.actions import TrackEventAction
from klaviyo_bridge.dependencies import get_klaviyo_client
from klaviyo_bridge.models import Event
from klaviyo_bridge.workers import celery_app, celery_config
from klaviyo_bridge.workers.dispatch_task import DispatchTask
from klaviyo_bridge.workers.retry_policy import track_policy

TRACK_POLICY = track_policy(celery_config)


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.track_event",
    retry_policy=TRACK_POLICY,
    max_retries=TRACK_POLICY.max_retries,
    soft_time_limit=TRACK_POLICY.soft_time_limit,
    time_limit=TRACK_POLICY.time_limit,
)
def track_event(self, event_data: dict[str, Any], once: bool = False) -> bool:
    """
    Track an event asynchronously.

    Args:
        event_data: JSON form of an Event
        once: Require unique_id and let Klaviyo deduplicate

    Returns:
        bool: True when Klaviyo accepted the event
    """
    def work() -> bool:
        event = Event.model_validate(event_data)
        with get_klaviyo_client(time_budget=TRACK_POLICY.soft_time_limit) as client:
            action = TrackEventAction(client)
            return action.execute_once(event) if once else action.execute(event)

    customer = event_data.get("customer") or {}
    return self.run_unit(
        work,
        event=event_data.get("name"),
        unique_id=event_data.get("unique_id"),
        email=customer.get("email"),
    )
