"""Tests for the host sequence and atomic invocations."""

import pytest
import structlog

from renewal_app.delivery.base import EventSink, RenewalEvent
from renewal_app.delivery.memory_sink import MemoryEventSink
from renewal_app.errors import DeliveryError
from renewal_app.host.invocation import BufferedEventSink, InvocationHost, StagedSubscriptionStore
from renewal_app.host.sequence import LedgerSequence
from renewal_app.persistence.subscription_store import InMemorySubscriptionStore
from renewal_app.state.controller import RenewalController
from renewal_app.state.models import SubscriptionRecord, SubscriptionState


class FlakySink(EventSink):
    """Accepts events until the nth emit, then fails like a full disk."""

    def __init__(self, fail_on: int):
        super().__init__("flaky")
        self.fail_on = fail_on
        self.events: list[RenewalEvent] = []

    def emit(self, event: RenewalEvent) -> None:
        if len(self.events) + 1 == self.fail_on:
            raise DeliveryError("No space left on device", sink_name=self.name, topic=event.topic)
        self.events.append(event)
        self._emitted_count += 1


class TestLedgerSequence:
    """Test LedgerSequence counter."""

    def test_starts_at_zero(self):
        sequence = LedgerSequence()
        assert sequence.current() == 0
        assert sequence() == 0

    def test_advance(self):
        sequence = LedgerSequence(5)
        assert sequence.advance() == 6
        assert sequence.advance(10) == 16

    def test_set_sequence_forward(self):
        sequence = LedgerSequence()
        sequence.set_sequence(100)
        sequence.set_sequence(100)
        assert sequence.current() == 100

    def test_never_moves_backwards(self):
        sequence = LedgerSequence(100)
        with pytest.raises(ValueError):
            sequence.set_sequence(99)
        with pytest.raises(ValueError):
            sequence.advance(-1)
        assert sequence.current() == 100

    def test_negative_start(self):
        with pytest.raises(ValueError):
            LedgerSequence(-1)


class TestStagedSubscriptionStore:
    """Test the staging overlay."""

    def test_reads_through_and_holds_writes(self):
        backing = InMemorySubscriptionStore()
        backing.set(1, SubscriptionRecord.create("alice"))
        staged = StagedSubscriptionStore(backing)

        staged.set(2, SubscriptionRecord.create("bob"))

        assert staged.get(1) == SubscriptionRecord.create("alice")
        assert staged.exists(2)
        assert not backing.exists(2)

        staged.commit()
        assert backing.get(2) == SubscriptionRecord.create("bob")
        assert staged.pending == {}


class TestBufferedEventSink:
    """Test event buffering."""

    def test_flush_forwards_in_order(self):
        target = MemoryEventSink()
        buffered = BufferedEventSink(target)

        buffered.emit(RenewalEvent("failed", 1, (1, 0), 0))
        buffered.emit(RenewalEvent("state_ch", 1, "retrying", 0))
        assert target.events == []

        buffered.flush()
        assert target.topics() == ["failed", "state_ch"]
        assert buffered.buffer == []


class TestInvocationHost:
    """Test all-or-nothing invocation semantics."""

    def setup_method(self):
        self.store = InMemorySubscriptionStore()
        self.sink = MemoryEventSink()
        self.sequence = LedgerSequence(12)
        self.host = InvocationHost(self.store, self.sink, self.sequence)

    def test_commit_on_success(self):
        with self.host.atomic(caller="alice") as invocation:
            assert invocation.sequence == 12
            assert invocation.caller == "alice"
            invocation.store.set(1, SubscriptionRecord.create("alice"))
            invocation.sink.emit(RenewalEvent("renewed", 1, "alice", 12))

        assert self.store.exists(1)
        assert self.sink.topics() == ["renewed"]
        assert self.host.committed == 1

    def test_discard_on_error(self):
        with pytest.raises(RuntimeError):
            with self.host.atomic() as invocation:
                invocation.store.set(1, SubscriptionRecord.create("alice"))
                invocation.sink.emit(RenewalEvent("renewed", 1, "alice", 12))
                raise RuntimeError("abort")

        assert not self.store.exists(1)
        assert self.sink.events == []
        assert self.host.aborted == 1
        assert self.host.committed == 0

    def test_invoke_passes_invocation(self):
        def write(invocation, subscription_id, owner):
            invocation.store.set(subscription_id, SubscriptionRecord.create(owner))
            return invocation.sequence

        assert self.host.invoke(write, 3, "carol") == 12
        assert self.store.get(3).owner == "carol"

    def test_default_sequence(self):
        host = InvocationHost(self.store, self.sink)
        assert host.sequence.current() == 0

    def test_context_bound_during_invocation(self):
        with self.host.atomic(caller="alice"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["host_sequence"] == 12
            assert bound["invocation_caller"] == "alice"

        assert "host_sequence" not in structlog.contextvars.get_contextvars()


class TestSinkFailureDuringCommit:
    """A sink failing while the buffer is flushed aborts the invocation."""

    def setup_method(self):
        self.store = InMemorySubscriptionStore()
        self.store.set(1, SubscriptionRecord.create("alice"))
        self.sink = FlakySink(fail_on=2)
        self.host = InvocationHost(self.store, self.sink, LedgerSequence(5))

    def test_store_untouched_and_counted_as_abort(self):
        with pytest.raises(DeliveryError):
            with self.host.atomic() as invocation:
                controller = RenewalController(invocation.store, invocation.sink, lambda: invocation.sequence)
                controller.renew(1, 3, 10, False)

        assert self.store.get(1) == SubscriptionRecord.create("alice")
        assert self.store.get(1).state == SubscriptionState.ACTIVE
        assert self.host.aborted == 1
        assert self.host.committed == 0
        # the first event was accepted before the sink failed
        assert [e.topic for e in self.sink.events] == ["failed"]

    def test_next_invocation_commits(self):
        self.sink.fail_on = 0

        with self.host.atomic() as invocation:
            controller = RenewalController(invocation.store, invocation.sink, lambda: invocation.sequence)
            controller.renew(1, 3, 10, False)

        assert self.store.get(1).failure_count == 1
        assert [e.topic for e in self.sink.events] == ["failed", "state_ch"]
        assert self.host.committed == 1
