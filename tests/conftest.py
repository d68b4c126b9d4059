"""Pytest configuration and shared fixtures."""

import pytest

from renewal_app.delivery.memory_sink import MemoryEventSink
from renewal_app.host.sequence import LedgerSequence
from renewal_app.persistence.subscription_store import InMemorySubscriptionStore
from renewal_app.state.controller import RenewalController
from renewal_app.state.models import SubscriptionRecord, SubscriptionState


@pytest.fixture
def owner() -> str:
    return "GOWNER-0001"


@pytest.fixture
def store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest.fixture
def sink() -> MemoryEventSink:
    return MemoryEventSink()


@pytest.fixture
def sequence() -> LedgerSequence:
    return LedgerSequence()


@pytest.fixture
def controller(store, sink, sequence) -> RenewalController:
    """Controller with open authorization over in-memory fakes."""
    return RenewalController(store=store, sink=sink, sequence=sequence)


@pytest.fixture
def retrying_record(owner) -> SubscriptionRecord:
    """Record after two failures, last attempted at sequence 100."""
    return SubscriptionRecord(
        owner=owner,
        state=SubscriptionState.RETRYING,
        failure_count=2,
        last_attempt_sequence=100,
    )
