"""
Identify customer Celery task.

Async task: identify_customer(customer_data)
Flow: rebuild Customer -> IdentifyCustomerAction -> Klaviyo POST /profiles/

Dependencies: klaviyo_bridge.application, klaviyo_bridge.workers
System role: Async profile identification task
"""

from typing import Any

from klaviyo_bridge.application.actions import IdentifyCustomerAction
from klaviyo_bridge.dependencies import get_klaviyo_client
from klaviyo_bridge.workers import celery_app, celery_config
from klaviyo_bridge.workers.dispatch_task import DispatchTask
from klaviyo_bridge.workers.retry_policy import identify_policy

IDENTIFY_POLICY = identify_policy(celery_config)


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.identify_customer",
    retry_policy=IDENTIFY_POLICY,
    max_retries=IDENTIFY_POLICY.max_retries,
    soft_time_limit=IDENTIFY_POLICY.soft_time_limit,
    time_limit=IDENTIFY_POLICY.time_limit,
)
def identify_customer(self, customer_data: dict[str, Any]) -> bool:
    """
    Identify a customer asynchronously.

    Args:
        customer_data: JSON form of a Customer

    Returns:
        bool: True when the profile was created or merged
    """
    def work() -> bool:
        with get_klaviyo_client(time_budget=IDENTIFY_POLICY.soft_time_limit) as client:
            return IdentifyCustomerAction(client).execute_from_dict(customer_data)

    return self.run_unit(work, email=customer_data.get("email"))
