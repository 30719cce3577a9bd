"""Monotonic time sources for typing sessions."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction.

    Sessions read time only through this interface, so hosts can drive them
    from their own event loop and tests can step time by hand.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class MonotonicClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock by ``seconds`` (may be negative) and return the new time."""
        self._now += seconds
        return self._now

    def set(self, value: float) -> None:
        self._now = float(value)
