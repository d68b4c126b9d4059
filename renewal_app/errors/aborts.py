"""
Abort-class errors for renewal entry points.

Raising one of these rejects the whole invocation: the host discards every
staged write and event. Apart from TerminalStateViolationError the caller
may try again later.
"""

from typing import Optional, Dict, Any


class InvocationAbort(Exception):
    """Base class for errors that abort an invocation without side effects."""

    def __init__(self, message: str, subscription_id: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.subscription_id = subscription_id
        self.context = context or {}
        self.permanent = False


class SubscriptionNotFoundError(InvocationAbort):
    """No record exists for the subscription id."""

    def __init__(self, subscription_id: int, **kwargs):
        super().__init__("Subscription not found", subscription_id=subscription_id, **kwargs)


class TerminalStateViolationError(InvocationAbort):
    """Renewal attempted on a record already in the failed state."""

    def __init__(self, subscription_id: int, **kwargs):
        super().__init__("Subscription is in FAILED state",
                         subscription_id=subscription_id, **kwargs)
        self.permanent = True


class CooldownActiveError(InvocationAbort):
    """Retry attempted before the cooldown window elapsed."""

    def __init__(self, subscription_id: int, current_sequence: int,
                 next_eligible_sequence: int, **kwargs):
        super().__init__("Cooldown period active", subscription_id=subscription_id, **kwargs)
        self.current_sequence = current_sequence
        self.next_eligible_sequence = next_eligible_sequence

    @property
    def remaining_units(self) -> int:
        return max(0, self.next_eligible_sequence - self.current_sequence)


class DuplicateSubscriptionError(InvocationAbort):
    """A record already exists for the subscription id."""

    def __init__(self, subscription_id: int, **kwargs):
        super().__init__("Subscription already exists", subscription_id=subscription_id, **kwargs)


class UnauthorizedCallerError(InvocationAbort):
    """Caller failed the configured authorization check."""

    def __init__(self, message: str = "agent not authorized",
                 caller: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.caller = caller
