"""Clock sources for reconciliation passes.

The rollout engine never reads the wall clock itself; drivers pass a clock
so that tests can pin time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC, truncated to whole seconds like API timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(microsecond=0)


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def step(self, delta: timedelta) -> None:
        self._now = self._now + delta
