"""File-based event sink writing one JSON object per line."""

from pathlib import Path

import orjson

from ..errors import DeliveryError
from .base import EventSink, RenewalEvent


class FileEventSink(EventSink):
    """Appends events to a JSONL file."""

    def __init__(self, output_path: str, name: str = "file", create_dirs: bool = True):
        super().__init__(name)
        self.output_path = Path(output_path)

        if create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, event: RenewalEvent) -> None:
        try:
            with open(self.output_path, "ab") as f:
                f.write(orjson.dumps(event.to_dict()) + b"\n")
        except OSError as e:
            self.logger.error(
                "Event write failed",
                sink_name=self.name,
                output_path=str(self.output_path),
                error=str(e)
            )
            raise DeliveryError(
                f"File system error: {e}",
                sink_name=self.name,
                topic=event.topic
            ) from e

        self._emitted_count += 1

    def read_events(self) -> list[dict]:
        """Read back every event written so far."""
        if not self.output_path.exists():
            return []
        with open(self.output_path, "rb") as f:
            return [orjson.loads(line) for line in f if line.strip()]
