"""
Clocks

Time source shared by agents and the ledger. Can be real time or frozen
for deterministic tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Protocol for time source."""

    def now(self) -> datetime:
        """Get current UTC time."""
        ...


class RealClock:
    """Real-time clock implementation."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Frozen clock for deterministic testing.

    Always returns the same time until moved.
    """

    def __init__(self, frozen_time: Optional[datetime] = None) -> None:
        self._time = frozen_time or datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        """Set the frozen time."""
        self._time = time

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward, e.g. advance(days=2). Returns the new time."""
        self._time = self._time + timedelta(**delta)
        return self._time
