"""Single-node identifier generation.

This module provides the IdGenerator class, the only stateful component of the
system. Each instance owns one ``(datacenter_id, worker_id)`` pair and issues
strictly increasing identifiers to any number of concurrent callers:

- the whole read/compare/update cycle runs under one lock
- sequence exhaustion within a millisecond blocks until the clock advances
- a clock observed behind the last issued millisecond is reported, never absorbed
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Final

from idforge.core.clock import Clock, system_clock_ms
from idforge.core.errors import (
    ClockRolledBack,
    SequenceWaitTimeout,
    TimestampOutOfRange,
)
from idforge.core.layout import DecodedId, IdentifierLayout

# Configure logger for this module
logger = logging.getLogger(__name__)

UNSET_TIMESTAMP: Final[int] = -1
DEFAULT_WAIT_TIMEOUT_MS: Final[float] = 1000.0
MILLISECONDS_PER_SECOND: Final[int] = 1000


@dataclass(frozen=True)
class GeneratorState:
    """Snapshot of the mutable generation state.

    ``last_timestamp`` is the wall-clock millisecond of the most recent
    identifier, or ``UNSET_TIMESTAMP`` before the first one.
    """

    last_timestamp: int = UNSET_TIMESTAMP
    sequence: int = 0


class IdGenerator:
    """Thread-safe generator of 64-bit, per-node monotonic identifiers.

    Args:
        datacenter_id: Datacenter coordinate of this node.
        worker_id: Worker coordinate of this node.
        layout: Bit layout shared by every cooperating generator.
        clock: Zero-argument callable returning wall-clock milliseconds.
        wait_timeout_ms: Upper bound on the sequence-exhaustion wait; ``None``
            waits for as long as the clock takes to advance.
        spin_sleep_seconds: Pause between clock reads while waiting; zero spins.

    Raises:
        InvalidConfiguration: If either id does not fit the layout.
    """

    def __init__(
        self,
        datacenter_id: int,
        worker_id: int,
        layout: IdentifierLayout | None = None,
        *,
        clock: Clock | None = None,
        wait_timeout_ms: float | None = DEFAULT_WAIT_TIMEOUT_MS,
        spin_sleep_seconds: float = 0.0,
    ) -> None:
        self._layout = layout or IdentifierLayout()
        self._layout.validate_node(datacenter_id, worker_id)
        self._datacenter_id = datacenter_id
        self._worker_id = worker_id
        self._clock = clock or system_clock_ms
        self._wait_timeout_ms = wait_timeout_ms
        self._spin_sleep_seconds = max(0.0, spin_sleep_seconds)
        self._lock = threading.Lock()
        self._last_timestamp = UNSET_TIMESTAMP
        self._sequence = 0

    @property
    def layout(self) -> IdentifierLayout:
        return self._layout

    @property
    def datacenter_id(self) -> int:
        return self._datacenter_id

    @property
    def worker_id(self) -> int:
        return self._worker_id

    @property
    def state(self) -> GeneratorState:
        """Return a consistent snapshot of the generation state."""
        with self._lock:
            return GeneratorState(self._last_timestamp, self._sequence)

    def generate(self) -> int:
        """Return an identifier larger than any previously issued by this instance.

        Raises:
            ClockRolledBack: The clock is behind the last issued millisecond.
            SequenceWaitTimeout: The sequence was exhausted and the clock did not
                advance within ``wait_timeout_ms``.
            TimestampOutOfRange: The clock is before the epoch or past the range
                of the timestamp field.
        """
        with self._lock:
            return self._next_id()

    def generate_many(self, count: int) -> list[int]:
        """Return ``count`` strictly increasing identifiers issued back to back.

        The batch is all or nothing for the caller. If identifier k fails, the
        k - 1 identifiers before it stay committed to the generator state and
        are discarded, so later identifiers still sort after them.

        Raises:
            ValueError: If ``count`` is less than one.
            ClockRolledBack, SequenceWaitTimeout, TimestampOutOfRange: As for
                :meth:`generate`, raised by the first failing identifier.
        """
        if count < 1:
            raise ValueError("count must be at least 1")
        with self._lock:
            return [self._next_id() for _ in range(count)]

    def decode(self, identifier: int) -> DecodedId:
        """Split an identifier into its components using this generator's layout."""
        return self._layout.decode(identifier)

    def _next_id(self) -> int:
        # Caller holds self._lock. State is committed only once every check passed.
        layout = self._layout
        current = self._clock()
        last = self._last_timestamp

        if current < last:
            error = ClockRolledBack(last, current)
            logger.warning(
                "Clock moved backwards by %d ms (datacenter=%d worker=%d)",
                error.rollback_ms,
                self._datacenter_id,
                self._worker_id,
            )
            raise error

        if current == last:
            sequence = (self._sequence + 1) & layout.max_sequence
            if sequence == 0:
                logger.debug("Sequence exhausted at %d; waiting for next millisecond", last)
                current = self._wait_next_millis(last)
        else:
            sequence = 0

        elapsed = current - layout.epoch
        if not 0 <= elapsed <= layout.max_timestamp:
            raise TimestampOutOfRange(elapsed, layout.max_timestamp)

        self._last_timestamp = current
        self._sequence = sequence
        return layout.encode(current, self._datacenter_id, self._worker_id, sequence)

    def _wait_next_millis(self, last_timestamp: int) -> int:
        """Block until the clock reads strictly later than ``last_timestamp``."""
        started = time.monotonic()
        current = self._clock()
        while current <= last_timestamp:
            if self._wait_timeout_ms is not None:
                waited_ms = (time.monotonic() - started) * MILLISECONDS_PER_SECOND
                if waited_ms > self._wait_timeout_ms:
                    logger.error(
                        "Clock stuck at %d for %.1f ms after sequence exhaustion",
                        last_timestamp,
                        waited_ms,
                    )
                    raise SequenceWaitTimeout(waited_ms, last_timestamp)
            if self._spin_sleep_seconds:
                time.sleep(self._spin_sleep_seconds)
            current = self._clock()
        return current


def new_generator(
    datacenter_id: int,
    worker_id: int,
    layout: IdentifierLayout | None = None,
    *,
    clock: Clock | None = None,
    wait_timeout_ms: float | None = DEFAULT_WAIT_TIMEOUT_MS,
    spin_sleep_seconds: float = 0.0,
) -> IdGenerator:
    """Construct a generator, raising ``InvalidConfiguration`` for bad node ids."""
    return IdGenerator(
        datacenter_id,
        worker_id,
        layout,
        clock=clock,
        wait_timeout_ms=wait_timeout_ms,
        spin_sleep_seconds=spin_sleep_seconds,
    )
