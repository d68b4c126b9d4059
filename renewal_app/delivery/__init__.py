"""Notification sinks for renewal events."""

from .base import EventSink, RenewalEvent
from .file_sink import FileEventSink
from .memory_sink import MemoryEventSink
from .stdout_sink import StdoutEventSink

__all__ = ["EventSink", "RenewalEvent", "MemoryEventSink", "StdoutEventSink", "FileEventSink"]
