"""
Renewal App - Subscription Renewal Controller

A deterministic renewal state machine for subscriptions hosted on a
serialized ledger. Enforces bounded retries, cooldown-gated escalation and
an absorbing failed state, driven entirely by persisted counters and the
host sequence number.
"""

__version__ = "0.1.0"
__author__ = "Renewal Team"
