"""
System failure error classifications for unrecoverable errors.

These exceptions represent failures of the storage binding, the event
transport, or the state machine itself, and are not caused by caller input.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """Evaluated transition would break a record invariant."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class DeliveryError(SystemFailureError):
    """Event sink failures."""

    def __init__(self, message: str, sink_name: Optional[str] = None,
                 topic: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.sink_name = sink_name
        self.topic = topic
