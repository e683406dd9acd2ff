"""Exceptions raised by the identifier generator.

All errors derive from :class:`IdGeneratorError` so callers can catch the whole
family at once. A failing ``generate()`` never mutates generator state.
"""

from __future__ import annotations


class IdGeneratorError(RuntimeError):
    """Base exception raised for identifier generation failures."""


class InvalidConfiguration(IdGeneratorError, ValueError):
    """Raised when the layout or node identity is out of range.

    Not retryable: the caller must supply corrected values.
    """

    def __init__(
        self,
        field: str,
        value: int,
        maximum: int | None = None,
        message: str | None = None,
    ) -> None:
        self.field = field
        self.value = value
        self.maximum = maximum
        if message is None:
            if maximum is None:
                message = f"{field}={value} is invalid"
            else:
                message = f"{field}={value} is outside the allowed range [0, {maximum}]"
        super().__init__(message)


class ClockRolledBack(IdGeneratorError):
    """Raised when the wall clock moved backwards past the last issued timestamp.

    Attributes:
        rollback_ms: How far behind the last recorded timestamp the clock is.
        last_timestamp: Millisecond of the most recently issued identifier.
        current_timestamp: Millisecond observed on the failing call.
    """

    def __init__(self, last_timestamp: int, current_timestamp: int) -> None:
        self.last_timestamp = last_timestamp
        self.current_timestamp = current_timestamp
        self.rollback_ms = last_timestamp - current_timestamp
        super().__init__(
            f"Clock moved backwards by {self.rollback_ms} ms; "
            f"refusing to generate identifiers until {last_timestamp}"
        )


class SequenceWaitTimeout(IdGeneratorError):
    """Raised when waiting for the next millisecond exceeds the configured bound."""

    def __init__(self, waited_ms: float, last_timestamp: int) -> None:
        self.waited_ms = waited_ms
        self.last_timestamp = last_timestamp
        super().__init__(
            f"Sequence exhausted at {last_timestamp} and the clock did not advance "
            f"within {waited_ms:.1f} ms"
        )


class TimestampOutOfRange(IdGeneratorError):
    """Raised when the clock falls before the epoch or past the timestamp field."""

    def __init__(self, elapsed_ms: int, max_timestamp: int) -> None:
        self.elapsed_ms = elapsed_ms
        self.max_timestamp = max_timestamp
        super().__init__(
            f"Elapsed time {elapsed_ms} ms since epoch does not fit in [0, {max_timestamp}]"
        )


class InvalidIdentifier(IdGeneratorError, ValueError):
    """Raised when a value handed to ``decode`` is not an unsigned 64-bit integer."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"{value} is not an unsigned 64-bit identifier")
