"""
Host sequence number.

The sequence is the only notion of time the controller sees. It is monotonic
and only moves between invocations.
"""


class LedgerSequence:
    """Monotonically non-decreasing sequence counter."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"Sequence must be non-negative, got {start}")
        self._value = start

    def current(self) -> int:
        return self._value

    def __call__(self) -> int:
        return self._value

    def advance(self, units: int = 1) -> int:
        """Move the sequence forward and return the new value."""
        if units < 0:
            raise ValueError(f"Sequence cannot move backwards (units={units})")
        self._value += units
        return self._value

    def set_sequence(self, value: int) -> None:
        """Jump to an absolute sequence number, never backwards."""
        if value < self._value:
            raise ValueError(
                f"Sequence cannot move backwards from {self._value} to {value}"
            )
        self._value = value
