"""Base classes for renewal event emission."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..logging.config import get_logger


def _plain(value: Any) -> Any:
    """Convert enums and tuples into JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class RenewalEvent:
    """One fire-and-forget notification, keyed by topic and subscription id."""
    topic: str
    subscription_id: Optional[int]
    payload: Any
    sequence: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "subscription_id": self.subscription_id,
            "payload": _plain(self.payload),
            "sequence": self.sequence,
        }


class EventSink(ABC):
    """
    One-way notification sink.

    Called synchronously within the invocation; no acknowledgement and no
    retry of the emission itself.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"renewal.delivery.{name}")
        self._emitted_count = 0

    @abstractmethod
    def emit(self, event: RenewalEvent) -> None:
        """Publish a single event."""

    def emit_all(self, events: list[RenewalEvent]) -> None:
        for event in events:
            self.emit(event)

    @property
    def emitted_count(self) -> int:
        return self._emitted_count
