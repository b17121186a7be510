"""Time source for the owner cache.

CausalityResolver asks a Clock how long a cached ownership record has been
held. Outside tests that is the process's monotonic clock; tests swap in a
MockClock and step it forward by hand.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def monotonic(self) -> float: ...


class SystemClock:
    """Reads time.monotonic(), so wall-clock adjustments never expire entries early."""

    def monotonic(self) -> float:
        return time.monotonic()


class MockClock:
    """Clock that only moves when advance() is called.

    A resolver with a 5 second TTL serves a record from cache after
    ``advance(4.0)`` and reads the store again once the total reaches 5.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def monotonic(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Cannot advance by negative seconds: {seconds}")
        self._now += seconds


DEFAULT_CLOCK: Clock = SystemClock()
