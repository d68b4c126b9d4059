"""
Host execution model.

The host serializes invocations, supplies the monotonic sequence number used
in place of time, and commits each invocation's writes and events all at once.
"""

from .invocation import BufferedEventSink, Invocation, InvocationHost, StagedSubscriptionStore
from .sequence import LedgerSequence

__all__ = [
    "LedgerSequence",
    "Invocation",
    "InvocationHost",
    "StagedSubscriptionStore",
    "BufferedEventSink",
]
