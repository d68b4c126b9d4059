"""Standard output event sink."""

import sys

import orjson

from ..errors import DeliveryError
from .base import EventSink, RenewalEvent


class StdoutEventSink(EventSink):
    """Prints each event as JSON or as a one-line summary."""

    def __init__(self, name: str = "stdout", format: str = "json"):
        super().__init__(name)
        if format not in ("json", "pretty"):
            raise DeliveryError(f"Unsupported format: {format}", sink_name=name)
        self.format = format

    def emit(self, event: RenewalEvent) -> None:
        print(self._format_event(event), file=sys.stdout, flush=True)
        self._emitted_count += 1

    def _format_event(self, event: RenewalEvent) -> str:
        data = event.to_dict()
        if self.format == "pretty":
            return f"[seq {data['sequence']}] EVENT: {data['topic']} #{data['subscription_id']} -> {data['payload']}"
        return orjson.dumps(data).decode()
