"""
State machine data models for subscription renewal.

This module defines immutable data structures for the persisted subscription
record, the caller-supplied retry policy, and the result of evaluating one
renewal attempt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SubscriptionState(str, Enum):
    """Renewal lifecycle states."""
    ACTIVE = "active"
    RETRYING = "retrying"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is SubscriptionState.FAILED


class EventTopic(str, Enum):
    """Notification topics emitted by renewal attempts."""
    RENEWED = "renewed"
    FAILED = "failed"
    STATE_CHANGED = "state_ch"


@dataclass(frozen=True)
class RenewalPolicy:
    """Retry policy supplied by the caller on every renewal attempt."""

    max_retries: int = 3                             # Failures tolerated before Failed
    cooldown_units: int = 10                         # Sequence units between retries

    def __post_init__(self) -> None:
        for name in ("max_retries", "cooldown_units"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class SubscriptionRecord:
    """Persisted renewal record for a single subscription id."""

    owner: str
    state: SubscriptionState = SubscriptionState.ACTIVE
    failure_count: int = 0
    last_attempt_sequence: int = 0                   # 0 before any attempt

    @classmethod
    def create(cls, owner: str) -> 'SubscriptionRecord':
        """Fresh Active record with no failures and no attempts."""
        return cls(owner=owner)

    def with_success(self, sequence: int) -> 'SubscriptionRecord':
        """Record a successful renewal at the given sequence."""
        return SubscriptionRecord(
            owner=self.owner,
            state=SubscriptionState.ACTIVE,
            failure_count=0,
            last_attempt_sequence=sequence
        )

    def with_failure(self, sequence: int, max_retries: int) -> 'SubscriptionRecord':
        """Record a failed renewal, escalating to Failed past max_retries."""
        failure_count = self.failure_count + 1
        if failure_count > max_retries:
            state = SubscriptionState.FAILED
        else:
            state = SubscriptionState.RETRYING
        return SubscriptionRecord(
            owner=self.owner,
            state=state,
            failure_count=failure_count,
            last_attempt_sequence=sequence
        )

    def next_eligible_sequence(self, cooldown_units: int) -> int:
        """First sequence at which a retry is allowed after the last failure."""
        return self.last_attempt_sequence + cooldown_units

    def to_dict(self) -> dict[str, Any]:
        return {
            'owner': self.owner,
            'state': self.state.value,
            'failure_count': self.failure_count,
            'last_attempt_sequence': self.last_attempt_sequence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'SubscriptionRecord':
        return cls(
            owner=data['owner'],
            state=SubscriptionState(data['state']),
            failure_count=int(data['failure_count']),
            last_attempt_sequence=int(data['last_attempt_sequence'])
        )


@dataclass(frozen=True)
class PendingEvent:
    """Event produced by an evaluation, before it is bound to a sink."""

    topic: EventTopic
    payload: Any


@dataclass(frozen=True)
class RenewalTransition:
    """Result of evaluating one renewal attempt against a record."""

    previous: SubscriptionRecord
    record: SubscriptionRecord
    succeeded: bool
    sequence: int
    events: tuple[PendingEvent, ...] = field(default_factory=tuple)

    @property
    def state_changed(self) -> bool:
        return self.previous.state != self.record.state


@dataclass(frozen=True)
class CooldownStatus:
    """Read-only view of a record's cooldown window."""

    on_cooldown: bool
    remaining_units: int
    last_attempt_sequence: int
    next_eligible_sequence: Optional[int] = None
