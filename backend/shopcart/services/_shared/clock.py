"""Millisecond wall clock used for every token expiry comparison."""

from __future__ import annotations

import time
from collections.abc import Callable

Clock = Callable[[], int]


def epoch_millis() -> int:
    """Return the current time as integer milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000
