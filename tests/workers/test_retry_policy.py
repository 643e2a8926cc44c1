"""Unit tests for RetryPolicy state transitions."""

import pytest
from celery.exceptions import SoftTimeLimitExceeded
from pydantic import ValidationError

from klaviyo_bridge.configs.celery_config import CelerySettings
from klaviyo_bridge.core.exceptions import (
    InvalidInputError,
    PermanentRemoteRejection,
    TransientRemoteFailure,
)
from klaviyo_bridge.models import Customer
from klaviyo_bridge.workers.retry_policy import (
    RetryPolicy,
    UnitState,
    catalog_policy,
    identify_policy,
    track_policy,
)


@pytest.fixture
def config() -> CelerySettings:
    return CelerySettings()


def _validation_error() -> ValidationError:
    try:
        Customer(email="")
    except ValidationError as e:
        return e
    raise AssertionError("Customer accepted an empty email")


class TestTrackPolicy:
    """Test suite for the track unit schedule."""

    def test_backoff_schedule(self, config):
        policy = track_policy(config)

        assert [policy.countdown_for(n) for n in (1, 2, 3, 4)] == [60, 300, 900, 900]
        assert policy.max_retries == 2
        assert policy.soft_time_limit == 30
        assert policy.time_limit == 45

    def test_transient_failure_is_retried_until_last_attempt(self, config):
        policy = track_policy(config)
        error = TransientRemoteFailure("down", status_code=503)

        first = policy.on_failure(1, error)
        second = policy.on_failure(2, error)
        third = policy.on_failure(3, error)

        assert (first.state, first.countdown) == (UnitState.RETRYING, 60)
        assert (second.state, second.countdown) == (UnitState.RETRYING, 300)
        assert third.state is UnitState.PERMANENTLY_FAILED
        assert third.exhausted is True


@pytest.mark.parametrize(
    "error",
    [
        InvalidInputError("missing unique_id", field="unique_id"),
        PermanentRemoteRejection("bad request", status_code=400),
        _validation_error(),
    ],
)
def test_non_retryable_errors_fail_on_first_attempt(error):
    transition = RetryPolicy(max_attempts=3).on_failure(1, error)

    assert transition.state is UnitState.PERMANENTLY_FAILED
    assert transition.exhausted is False


def test_unexpected_errors_are_retried():
    transition = RetryPolicy(max_attempts=3).on_failure(1, RuntimeError("boom"))

    assert transition.state is UnitState.RETRYING
    assert transition.countdown == 0


def test_identify_and_catalog_policies_share_the_ceiling(config):
    assert identify_policy(config).max_attempts == 3
    assert identify_policy(config).countdown_for(1) == 0
    assert catalog_policy(config).soft_time_limit == 120
    assert catalog_policy(config).time_limit == 135


def test_single_attempt_policy_never_retries():
    transition = RetryPolicy(max_attempts=1).on_failure(1, TransientRemoteFailure("down"))

    assert transition.state is UnitState.PERMANENTLY_FAILED
    assert transition.exhausted is True


def test_soft_time_limit_is_retried_then_exhausted(config):
    policy = track_policy(config)
    error = SoftTimeLimitExceeded()

    assert policy.on_failure(1, error).state is UnitState.RETRYING
    assert policy.on_failure(3, error).exhausted is True


def test_policy_without_soft_limit_has_no_hard_limit():
    assert RetryPolicy().time_limit is None
