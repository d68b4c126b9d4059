"""
All-or-nothing invocation support.

Each entry point runs against a staging overlay of the record store and a
buffered event sink. Both are flushed to the backing store and sink only when
the call returns normally; any exception discards them.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, TypeVar

import structlog

from ..delivery.base import EventSink, RenewalEvent
from ..logging.config import get_logger
from ..persistence.subscription_store import SubscriptionStore
from ..state.models import SubscriptionRecord
from .sequence import LedgerSequence

logger = get_logger(__name__)

T = TypeVar("T")


class StagedSubscriptionStore(SubscriptionStore):
    """Overlay that reads through to the backing store and holds writes."""

    def __init__(self, backing: SubscriptionStore):
        self.backing = backing
        self.pending: dict[int, SubscriptionRecord] = {}

    def get(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        if subscription_id in self.pending:
            return self.pending[subscription_id]
        return self.backing.get(subscription_id)

    def set(self, subscription_id: int, record: SubscriptionRecord) -> None:
        self.pending[subscription_id] = record

    def exists(self, subscription_id: int) -> bool:
        return subscription_id in self.pending or self.backing.exists(subscription_id)

    def commit(self) -> None:
        for subscription_id, record in self.pending.items():
            self.backing.set(subscription_id, record)
        self.pending.clear()


class BufferedEventSink(EventSink):
    """Collects events until the invocation commits."""

    def __init__(self, target: EventSink):
        super().__init__(f"buffered.{target.name}")
        self.target = target
        self.buffer: list[RenewalEvent] = []

    def emit(self, event: RenewalEvent) -> None:
        self.buffer.append(event)
        self._emitted_count += 1

    def flush(self) -> None:
        self.target.emit_all(self.buffer)
        self.buffer.clear()


@dataclass
class Invocation:
    """Handles given to a single entry point call."""
    store: StagedSubscriptionStore
    sink: BufferedEventSink
    sequence: int
    caller: Optional[str] = None


class InvocationHost:
    """Serializes invocations and applies their effects atomically."""

    def __init__(
        self,
        store: SubscriptionStore,
        sink: EventSink,
        sequence: Optional[LedgerSequence] = None
    ):
        self.store = store
        self.sink = sink
        self.sequence = sequence or LedgerSequence()
        self._lock = threading.RLock()
        self.committed = 0
        self.aborted = 0

    @contextmanager
    def atomic(self, caller: Optional[str] = None) -> Iterator[Invocation]:
        """
        Run a block as one invocation; commit on exit, discard on error.

        Buffered events are flushed before staged writes reach the backing
        store, so a sink failure leaves every record as it was. Events the
        sink accepted before failing cannot be recalled.
        """
        with self._lock:
            invocation = Invocation(
                store=StagedSubscriptionStore(self.store),
                sink=BufferedEventSink(self.sink),
                sequence=self.sequence.current(),
                caller=caller
            )
            with structlog.contextvars.bound_contextvars(
                host_sequence=invocation.sequence,
                invocation_caller=caller
            ):
                try:
                    yield invocation
                    invocation.sink.flush()
                    invocation.store.commit()
                except Exception as e:
                    self.aborted += 1
                    logger.info(
                        "Invocation aborted",
                        discarded_writes=len(invocation.store.pending),
                        discarded_events=len(invocation.sink.buffer),
                        error_type=type(e).__name__,
                        error=str(e)
                    )
                    raise

                self.committed += 1

    def invoke(self, fn: Callable[..., T], *args: Any, caller: Optional[str] = None, **kwargs: Any) -> T:
        """Call fn(invocation, *args, **kwargs) inside an atomic invocation."""
        with self.atomic(caller=caller) as invocation:
            return fn(invocation, *args, **kwargs)
