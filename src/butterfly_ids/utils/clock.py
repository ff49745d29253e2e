# src/butterfly_ids/utils/clock.py
"""Wall-clock helpers."""

import time

NANOSECONDS_PER_MILLISECOND = 1_000_000


def now_millis() -> int:
    """Return the current Unix time in whole milliseconds."""
    return time.time_ns() // NANOSECONDS_PER_MILLISECOND
