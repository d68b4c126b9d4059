"""
Core renewal state machine logic.

Pure functions: given the current record, the caller's policy and the host
sequence number they decide whether the attempt may proceed and what the next
record and emitted events are. Nothing here touches storage or sinks.
"""

from typing import Optional

from ..errors import (
    CooldownActiveError,
    StateTransitionError,
    SubscriptionNotFoundError,
    TerminalStateViolationError,
)
from ..logging.config import get_gating_logger, get_state_logger, log_gate_decision, log_state_transition
from .models import (
    CooldownStatus,
    EventTopic,
    PendingEvent,
    RenewalPolicy,
    RenewalTransition,
    SubscriptionRecord,
    SubscriptionState,
)

state_logger = get_state_logger(__name__)
gating_logger = get_gating_logger(__name__)


def require_record(
    record: Optional[SubscriptionRecord],
    subscription_id: int
) -> SubscriptionRecord:
    """Existence gate: a missing record is an error, never an implicit create."""
    if record is None:
        log_gate_decision(
            gating_logger,
            gate_name="record_exists",
            passed=False,
            subscription_id=subscription_id,
            reason="no record stored for id"
        )
        raise SubscriptionNotFoundError(subscription_id)
    return record


def check_not_terminal(record: SubscriptionRecord, subscription_id: int) -> None:
    """Terminal gate: Failed records accept no further attempts."""
    if record.state.is_terminal:
        log_gate_decision(
            gating_logger,
            gate_name="not_terminal",
            passed=False,
            subscription_id=subscription_id,
            reason="record is in FAILED state",
            context={"failure_count": record.failure_count}
        )
        raise TerminalStateViolationError(
            subscription_id,
            context={"failure_count": record.failure_count}
        )


def check_cooldown(
    record: SubscriptionRecord,
    cooldown_units: int,
    now: int,
    subscription_id: int
) -> None:
    """
    Cooldown gate.

    Only applies once a failure has been recorded. A fresh record, or one that
    just succeeded, may be renewed immediately.
    """
    if record.failure_count == 0:
        return

    next_eligible = record.next_eligible_sequence(cooldown_units)
    if now < next_eligible:
        log_gate_decision(
            gating_logger,
            gate_name="cooldown",
            passed=False,
            subscription_id=subscription_id,
            reason="cooldown window has not elapsed",
            context={
                "current_sequence": now,
                "last_attempt_sequence": record.last_attempt_sequence,
                "cooldown_units": cooldown_units,
                "next_eligible_sequence": next_eligible
            }
        )
        raise CooldownActiveError(
            subscription_id,
            current_sequence=now,
            next_eligible_sequence=next_eligible
        )

    log_gate_decision(
        gating_logger,
        gate_name="cooldown",
        passed=True,
        subscription_id=subscription_id,
        reason="cooldown window elapsed",
        context={"current_sequence": now, "next_eligible_sequence": next_eligible}
    )


def check_preconditions(
    record: Optional[SubscriptionRecord],
    policy: RenewalPolicy,
    now: int,
    subscription_id: int
) -> SubscriptionRecord:
    """Run existence, terminal and cooldown gates in order."""
    record = require_record(record, subscription_id)
    check_not_terminal(record, subscription_id)
    check_cooldown(record, policy.cooldown_units, now, subscription_id)
    return record


def evaluate_renewal(
    record: SubscriptionRecord,
    policy: RenewalPolicy,
    now: int,
    succeeded: bool,
    subscription_id: int
) -> RenewalTransition:
    """
    Compute the next record and events for one renewal attempt.

    Preconditions must already hold (see check_preconditions).

    Args:
        record: Current persisted record
        policy: Retry limit and cooldown supplied by the caller
        now: Current host sequence number
        succeeded: Observed outcome of the renewal
        subscription_id: Id of the record, for logging

    Returns:
        RenewalTransition with the full next record and ordered events
    """
    if succeeded:
        next_record = record.with_success(now)
        events = (PendingEvent(EventTopic.RENEWED, record.owner),)
        trigger = "renewal_succeeded"
    else:
        next_record = record.with_failure(now, policy.max_retries)
        events = (
            PendingEvent(EventTopic.FAILED, (next_record.failure_count, now)),
            PendingEvent(EventTopic.STATE_CHANGED, next_record.state),
        )
        trigger = "retry_limit_exceeded" if next_record.state.is_terminal else "renewal_failed"

    transition = RenewalTransition(
        previous=record,
        record=next_record,
        succeeded=succeeded,
        sequence=now,
        events=events
    )
    validate_transition(transition, subscription_id)

    log_state_transition(
        state_logger,
        subscription_id=subscription_id,
        from_state=record.state.value,
        to_state=next_record.state.value,
        trigger=trigger,
        context={
            "failure_count": next_record.failure_count,
            "max_retries": policy.max_retries,
            "sequence": now
        }
    )
    return transition


def validate_transition(transition: RenewalTransition, subscription_id: int) -> None:
    """Reject transitions that would break record invariants."""
    previous = transition.previous
    record = transition.record
    attempted = f"{previous.state.value}->{record.state.value}"

    if previous.state.is_terminal:
        raise StateTransitionError(
            "Failed records have no outgoing transitions",
            current_state=previous.state.value,
            attempted_transition=attempted,
            context={"subscription_id": subscription_id}
        )

    if record.state == SubscriptionState.ACTIVE and record.failure_count != 0:
        raise StateTransitionError(
            "Active record must have zero failures",
            current_state=previous.state.value,
            attempted_transition=attempted,
            context={"subscription_id": subscription_id, "failure_count": record.failure_count}
        )

    if record.last_attempt_sequence < previous.last_attempt_sequence:
        raise StateTransitionError(
            "Attempt sequence moved backwards",
            current_state=previous.state.value,
            attempted_transition=attempted,
            context={
                "subscription_id": subscription_id,
                "previous_sequence": previous.last_attempt_sequence,
                "sequence": record.last_attempt_sequence
            }
        )


def cooldown_status(record: SubscriptionRecord, cooldown_units: int, now: int) -> CooldownStatus:
    """Describe the cooldown window of a record at sequence `now`."""
    if record.failure_count == 0:
        return CooldownStatus(
            on_cooldown=False,
            remaining_units=0,
            last_attempt_sequence=record.last_attempt_sequence,
            next_eligible_sequence=None
        )

    next_eligible = record.next_eligible_sequence(cooldown_units)
    remaining = max(0, next_eligible - now)
    return CooldownStatus(
        on_cooldown=remaining > 0,
        remaining_units=remaining,
        last_attempt_sequence=record.last_attempt_sequence,
        next_eligible_sequence=next_eligible
    )
