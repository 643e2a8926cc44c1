"""
Unit-of-work retry policy.

Decides the next state of a unit of work after a failed attempt:

    QUEUED -> RUNNING -> SUCCEEDED
                      -> RETRYING -> QUEUED (delayed re-delivery)
                      -> PERMANENTLY_FAILED

Precondition failures and 4xx rejections fail after a single attempt.
Everything else, including a soft time limit hit mid-attempt, is retried
until the attempt budget is spent.

Dependencies: celery, pydantic, klaviyo_bridge.core
System role: Job-level retry decisions for Celery tasks
"""

from dataclasses import dataclass
from enum import Enum

from celery.exceptions import SoftTimeLimitExceeded
from pydantic import ValidationError

from klaviyo_bridge.configs.celery_config import CelerySettings
from klaviyo_bridge.core.exceptions import InvalidInputError, PermanentRemoteRejection

NON_RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    InvalidInputError,
    PermanentRemoteRejection,
    ValidationError,
)

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (SoftTimeLimitExceeded,)


class UnitState(str, Enum):
    """Lifecycle states of a unit of work."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    RETRYING = "retrying"
    PERMANENTLY_FAILED = "permanently_failed"


@dataclass(frozen=True)
class Transition:
    """Next state after a failed attempt."""

    state: UnitState
    countdown: int | None = None
    exhausted: bool = False


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with an optional backoff schedule.

    Attributes:
        max_attempts: Total attempts, including the first
        backoff: Countdown in seconds before re-delivery after attempt N
            (index N-1); the last entry repeats, empty means immediate
        soft_time_limit: Seconds per attempt before SoftTimeLimitExceeded is
            raised inside the unit
        hard_time_limit_grace: Extra seconds before the worker kills the attempt
    """

    max_attempts: int = 3
    backoff: tuple[int, ...] = ()
    soft_time_limit: int | None = None
    hard_time_limit_grace: int = 15

    @property
    def max_retries(self) -> int:
        """Re-deliveries allowed after the first attempt."""
        return self.max_attempts - 1

    @property
    def time_limit(self) -> int | None:
        """Hard time limit per attempt, a backstop past the soft limit."""
        if self.soft_time_limit is None:
            return None
        return self.soft_time_limit + self.hard_time_limit_grace

    def countdown_for(self, attempt: int) -> int:
        """Countdown before re-delivering after the given failed attempt."""
        if not self.backoff:
            return 0
        return self.backoff[min(attempt, len(self.backoff)) - 1]

    def on_failure(self, attempt: int, exc: BaseException) -> Transition:
        """
        Decide what happens after a failed attempt.

        Args:
            attempt: 1-based number of the attempt that failed
            exc: Fault raised by the attempt

        Returns:
            Transition: RETRYING with a countdown, or PERMANENTLY_FAILED
        """
        retryable = isinstance(exc, RETRYABLE_ERRORS) or not isinstance(exc, NON_RETRYABLE_ERRORS)
        if not retryable:
            return Transition(UnitState.PERMANENTLY_FAILED)
        if attempt >= self.max_attempts:
            return Transition(UnitState.PERMANENTLY_FAILED, exhausted=True)
        return Transition(UnitState.RETRYING, countdown=self.countdown_for(attempt))


def track_policy(config: CelerySettings) -> RetryPolicy:
    """Track units: extended backoff schedule."""
    return RetryPolicy(
        max_attempts=config.task_max_attempts,
        backoff=tuple(config.track_retry_backoff),
        soft_time_limit=config.track_time_limit,
        hard_time_limit_grace=config.hard_time_limit_grace,
    )


def identify_policy(config: CelerySettings) -> RetryPolicy:
    """Identify and profile units: same ceiling, immediate re-delivery."""
    return RetryPolicy(
        max_attempts=config.task_max_attempts,
        soft_time_limit=config.identify_time_limit,
        hard_time_limit_grace=config.hard_time_limit_grace,
    )


def catalog_policy(config: CelerySettings) -> RetryPolicy:
    """Catalog units: longer time limit for many sequential calls."""
    return RetryPolicy(
        max_attempts=config.task_max_attempts,
        soft_time_limit=config.catalog_time_limit,
        hard_time_limit_grace=config.hard_time_limit_grace,
    )
