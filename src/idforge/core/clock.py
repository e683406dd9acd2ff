"""Wall-clock helpers for identifier generation."""

from __future__ import annotations

import time
from collections.abc import Callable

NANOSECONDS_PER_MILLISECOND = 1_000_000

Clock = Callable[[], int]


def system_clock_ms() -> int:
    """Return the current wall-clock time in whole milliseconds since the Unix epoch."""
    return time.time_ns() // NANOSECONDS_PER_MILLISECOND
