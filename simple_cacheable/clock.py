# simple_cacheable/clock.py

"""
Time providers used by cache backends.

Backends never read the wall clock directly; they are handed a ``Clock``
at construction so that expiry can be driven deterministically in tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol, Union, runtime_checkable

Instant = Union[datetime, int, float]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_datetime(instant: Instant) -> datetime:
    """
    Normalize an instant to an aware UTC datetime.
    :param instant: A datetime (naive values are taken as UTC) or a POSIX timestamp.
    :return: Aware datetime in UTC.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            return instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(timezone.utc)
    return datetime.fromtimestamp(instant, tz=timezone.utc)


def timestamp(instant: datetime) -> int:
    """Whole-second POSIX timestamp of an instant."""
    return int(instant.timestamp())


@runtime_checkable
class Clock(Protocol):
    """
    Interface for time providers.
    """

    def now(self) -> datetime:
        """
        Return the current instant.
        :raises ClockError: If the time source is unavailable.
        """
        ...

    def at(self, instant: Instant) -> "Clock":
        """
        Return a provider pinned to ``instant``.
        :param instant: Base instant of the derived provider.
        """
        ...


class SystemClock:
    """
    Wall-clock time provider (UTC).
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def at(self, instant: Instant) -> "FrozenClock":
        return FrozenClock(instant)


class FrozenClock:
    """
    Time provider that only moves when told to.

    Useful for tests and for resolving relative spans against a fixed base.
    """

    def __init__(self, instant: Instant = EPOCH) -> None:
        self._now = to_datetime(instant)

    def now(self) -> datetime:
        return self._now

    def at(self, instant: Instant) -> "FrozenClock":
        return FrozenClock(instant)

    def set(self, instant: Instant) -> None:
        self._now = to_datetime(instant)

    def advance(self, delta: Union[int, float, timedelta]) -> None:
        """
        Move the clock forward.
        :param delta: Seconds or a timedelta; negative values move it back.
        """
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._now = self._now + delta

    def __repr__(self) -> str:
        return f"FrozenClock({self._now.isoformat()})"


__all__ = [
    "Clock",
    "EPOCH",
    "FrozenClock",
    "Instant",
    "SystemClock",
    "timestamp",
    "to_datetime",
]
