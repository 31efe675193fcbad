"""Controllable millisecond clock for time-dependent tests."""

from __future__ import annotations

from shopcart.services._shared.clock import epoch_millis


class FakeClock:
    """Callable returning a fixed epoch-millisecond value until advanced.

    ``reads`` counts how often the time was sampled.
    """

    def __init__(self, start_ms: int | None = None) -> None:
        self.now = epoch_millis() if start_ms is None else start_ms
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now

    def advance(self, *, ms: int = 0, seconds: int = 0, days: int = 0) -> int:
        self.now += ms + seconds * 1000 + days * 86_400_000
        return self.now
