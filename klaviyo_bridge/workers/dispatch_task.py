"""
Base Celery task for Klaviyo units of work.

Runs one unit, applies its RetryPolicy on failure and logs every state
transition with the identifying fields of the fact it carries.

Dependencies: celery, klaviyo_bridge.observability
System role: Dispatch/retry execution for all Klaviyo tasks
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from celery import Task

from klaviyo_bridge.core.exceptions import PermanentJobFailure
from klaviyo_bridge.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)
from klaviyo_bridge.workers.retry_policy import RetryPolicy, UnitState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DispatchTask(Task):
    """Celery task base applying a per-task RetryPolicy."""

    retry_policy: RetryPolicy = RetryPolicy()

    def run_unit(self, work: Callable[[], T], **fact_fields: Any) -> T:
        """
        Execute one attempt of a unit of work.

        Args:
            work: Zero-argument callable performing the action
            **fact_fields: Identifying fields of the fact, for logs

        Returns:
            Result of work()

        Raises:
            celery.exceptions.Retry: When the unit is scheduled for re-delivery
            PermanentJobFailure: When the attempt budget is exhausted
            Exception: The original fault when it is not retryable
        """
        attempt = self.request.retries + 1
        log_with_context(
            logger,
            logging.INFO,
            f"{self.name} attempt {attempt}/{self.retry_policy.max_attempts}",
            task=self.name,
            state=UnitState.RUNNING.value,
            attempt=attempt,
            **fact_fields,
        )

        try:
            result = work()
        except Exception as e:
            transition = self.retry_policy.on_failure(attempt, e)

            if transition.state is UnitState.RETRYING:
                log_with_context(
                    logger,
                    logging.WARNING,
                    f"{self.name} failed, re-queued in {transition.countdown}s: {e}",
                    task=self.name,
                    state=UnitState.RETRYING.value,
                    attempt=attempt,
                    countdown=transition.countdown,
                    **fact_fields,
                )
                raise self.retry(
                    exc=e,
                    countdown=transition.countdown,
                    max_retries=self.retry_policy.max_retries,
                )

            if not transition.exhausted:
                log_exception_with_context(
                    logger,
                    f"{self.name} rejected, not retrying",
                    e,
                    task=self.name,
                    state=UnitState.PERMANENTLY_FAILED.value,
                    attempt=attempt,
                    **fact_fields,
                )
                raise

            log_exception_with_context(
                logger,
                f"{self.name} failed permanently after {attempt} attempts",
                e,
                level=logging.CRITICAL,
                task=self.name,
                state=UnitState.PERMANENTLY_FAILED.value,
                attempt=attempt,
                **fact_fields,
            )
            raise PermanentJobFailure(self.name, attempt, details=dict(fact_fields)) from e

        log_with_context(
            logger,
            logging.INFO,
            f"{self.name} succeeded",
            task=self.name,
            state=UnitState.SUCCEEDED.value,
            attempt=attempt,
            **fact_fields,
        )
        return result
