"""In-memory event sink, used for tests and as the default host transport."""

from .base import EventSink, RenewalEvent


class MemoryEventSink(EventSink):
    """Keeps every emitted event in order."""

    def __init__(self, name: str = "memory"):
        super().__init__(name)
        self.events: list[RenewalEvent] = []

    def emit(self, event: RenewalEvent) -> None:
        self.events.append(event)
        self._emitted_count += 1

    def topics(self) -> list[str]:
        return [event.topic for event in self.events]

    def for_subscription(self, subscription_id: int) -> list[RenewalEvent]:
        return [event for event in self.events if event.subscription_id == subscription_id]

    def clear(self) -> None:
        self.events.clear()
