"""
Profile maintenance Celery tasks.

Async tasks:
- delete_profile(email): GDPR deletion request
- update_list_membership(list_id, email, subscribe)

"No profile for this email" is a successful unit returning False.

Dependencies: klaviyo_bridge.application, klaviyo_bridge.workers
System role: Async profile deletion and list membership tasks
"""

from klaviyo_bridge.application.actions import DeleteProfileAction, ListMembershipAction
from klaviyo_bridge.dependencies import get_klaviyo_client
from klaviyo_bridge.workers import celery_app, celery_config
from klaviyo_bridge.workers.dispatch_task import DispatchTask
from klaviyo_bridge.workers.retry_policy import identify_policy

PROFILE_POLICY = identify_policy(celery_config)


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.delete_profile",
    retry_policy=PROFILE_POLICY,
    max_retries=PROFILE_POLICY.max_retries,
    soft_time_limit=PROFILE_POLICY.soft_time_limit,
    time_limit=PROFILE_POLICY.time_limit,
)
def delete_profile(self, email: str) -> bool:
    """Request deletion of the profile with this email."""
    def work() -> bool:
        with get_klaviyo_client(time_budget=PROFILE_POLICY.soft_time_limit) as client:
            return DeleteProfileAction(client).execute(email)

    return self.run_unit(work, email=email)


@celery_app.task(
    bind=True,
    base=DispatchTask,
    name="klaviyo.update_list_membership",
    retry_policy=PROFILE_POLICY,
    max_retries=PROFILE_POLICY.max_retries,
    soft_time_limit=PROFILE_POLICY.soft_time_limit,
    time_limit=PROFILE_POLICY.time_limit,
)
def update_list_membership(self, list_id: str, email: str, subscribe: bool = True) -> bool:
    """Add (subscribe=True) or remove a profile to or from a list."""
    def work() -> bool:
        with get_klaviyo_client(time_budget=PROFILE_POLICY.soft_time_limit) as client:
            action = ListMembershipAction(client)
            return action.add(list_id, email) if subscribe else action.remove(list_id, email)

    return self.run_unit(work, email=email, list_id=list_id, subscribe=subscribe)
