"""Keyed record storage bindings for subscription records."""

from .subscription_store import (
    InMemorySubscriptionStore,
    SQLiteSubscriptionStore,
    SubscriptionStore,
)

__all__ = ["SubscriptionStore", "InMemorySubscriptionStore", "SQLiteSubscriptionStore"]
