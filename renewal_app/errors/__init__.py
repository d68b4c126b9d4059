"""
Error classification for the renewal controller.

Abort-class errors reject a whole invocation with nothing persisted.
System failures signal broken storage, delivery or state invariants.
"""

from .aborts import (
    InvocationAbort,
    SubscriptionNotFoundError,
    TerminalStateViolationError,
    CooldownActiveError,
    DuplicateSubscriptionError,
    UnauthorizedCallerError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    PersistenceError,
    DeliveryError,
)

__all__ = [
    # Invocation aborts
    "InvocationAbort",
    "SubscriptionNotFoundError",
    "TerminalStateViolationError",
    "CooldownActiveError",
    "DuplicateSubscriptionError",
    "UnauthorizedCallerError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "PersistenceError",
    "DeliveryError",
]
