"""Tests for renewal state data models."""

import pytest

from renewal_app.state.models import (
    CooldownStatus, EventTopic, PendingEvent, RenewalPolicy, RenewalTransition,
    SubscriptionRecord, SubscriptionState
)


class TestSubscriptionRecord:
    """Test SubscriptionRecord data model."""

    def test_create_is_active_with_no_attempts(self):
        record = SubscriptionRecord.create("alice")

        assert record.owner == "alice"
        assert record.state == SubscriptionState.ACTIVE
        assert record.failure_count == 0
        assert record.last_attempt_sequence == 0

    def test_record_is_immutable(self):
        record = SubscriptionRecord.create("alice")

        with pytest.raises(AttributeError):
            record.failure_count = 5

    def test_with_success_resets_failures(self, retrying_record):
        renewed = retrying_record.with_success(150)

        assert renewed.state == SubscriptionState.ACTIVE
        assert renewed.failure_count == 0
        assert renewed.last_attempt_sequence == 150
        assert renewed.owner == retrying_record.owner
        # Original untouched
        assert retrying_record.failure_count == 2

    def test_with_failure_within_limit_is_retrying(self):
        record = SubscriptionRecord.create("alice").with_failure(5, max_retries=2)

        assert record.state == SubscriptionState.RETRYING
        assert record.failure_count == 1
        assert record.last_attempt_sequence == 5

    def test_with_failure_past_limit_is_failed(self, retrying_record):
        failed = retrying_record.with_failure(200, max_retries=2)

        assert failed.state == SubscriptionState.FAILED
        assert failed.failure_count == 3

    def test_zero_retries_first_failure_is_terminal(self):
        failed = SubscriptionRecord.create("alice").with_failure(0, max_retries=0)

        assert failed.state == SubscriptionState.FAILED
        assert failed.failure_count == 1

    def test_next_eligible_sequence(self, retrying_record):
        assert retrying_record.next_eligible_sequence(10) == 110
        assert retrying_record.next_eligible_sequence(0) == 100

    def test_dict_conversion(self, retrying_record):
        data = retrying_record.to_dict()

        assert data == {
            "owner": retrying_record.owner,
            "state": "retrying",
            "failure_count": 2,
            "last_attempt_sequence": 100,
        }
        assert SubscriptionRecord.from_dict(data) == retrying_record


class TestSubscriptionState:
    """Test SubscriptionState enum."""

    def test_only_failed_is_terminal(self):
        assert SubscriptionState.FAILED.is_terminal
        assert not SubscriptionState.ACTIVE.is_terminal
        assert not SubscriptionState.RETRYING.is_terminal

    def test_string_values(self):
        assert SubscriptionState("failed") is SubscriptionState.FAILED
        assert EventTopic.STATE_CHANGED.value == "state_ch"


class TestRenewalPolicy:
    """Test RenewalPolicy validation."""

    def test_defaults(self):
        policy = RenewalPolicy()
        assert policy.max_retries == 3
        assert policy.cooldown_units == 10

    @pytest.mark.parametrize("kwargs", [
        {"max_retries": -1},
        {"cooldown_units": -5},
        {"max_retries": 1.5},
        {"cooldown_units": True},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RenewalPolicy(**kwargs)


class TestRenewalTransition:
    """Test RenewalTransition helpers."""

    def test_state_changed(self):
        before = SubscriptionRecord.create("alice")
        after = before.with_failure(1, max_retries=3)
        transition = RenewalTransition(
            previous=before,
            record=after,
            succeeded=False,
            sequence=1,
            events=(PendingEvent(EventTopic.FAILED, (1, 1)),)
        )

        assert transition.state_changed is True
        assert len(transition.events) == 1

    def test_cooldown_status_defaults(self):
        status = CooldownStatus(on_cooldown=False, remaining_units=0, last_attempt_sequence=0)
        assert status.next_eligible_sequence is None
