# simple_cacheable/ttl.py

"""
Time-to-live resolution and expiry checks shared by all backends.

A TTL is one of:

- ``None``: inherit the backend default, or never expire when there is none
- ``int``: seconds relative to the moment of the call
- ``timedelta``: a relative span, resolved the same way

Every non-null TTL is resolved relative to "now" at write time.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Union

from simple_cacheable.clock import EPOCH, Clock, timestamp
from simple_cacheable.exceptions import CacheBackendError

logger = logging.getLogger(__name__)

TTL = Union[int, timedelta, None]


def current_timestamp(clock: Clock) -> int:
    """
    Read the clock as a whole-second timestamp.
    :raises CacheBackendError: If the clock cannot be read.
    """
    try:
        return timestamp(clock.now())
    except Exception as exc:
        logger.warning("Time provider failed: %s", exc)
        raise CacheBackendError(str(exc)) from exc


def _span_seconds(span: timedelta, clock: Clock) -> int:
    try:
        return timestamp(clock.at(EPOCH).now() + span)
    except Exception as exc:
        logger.warning("Time provider failed while resolving %r: %s", span, exc)
        raise CacheBackendError(str(exc)) from exc


def resolve_ttl(ttl: TTL, default_ttl: TTL, clock: Clock) -> Optional[int]:
    """
    Resolve a caller TTL into relative seconds.

    :param ttl: TTL passed to the write call.
    :param default_ttl: Backend default substituted when ``ttl`` is None.
    :param clock: Time provider used to resolve spans.
    :return: Seconds from now, or None for "never expires".
    :raises TypeError: If the TTL is of an unsupported type.
    :raises CacheBackendError: If the clock fails.
    """
    if ttl is None:
        ttl = default_ttl

    if ttl is None:
        return None

    # bool is an int subclass
    if isinstance(ttl, bool):
        raise TypeError("TTL must be an int, a timedelta or None; got bool")

    if isinstance(ttl, int):
        return ttl

    if isinstance(ttl, timedelta):
        return _span_seconds(ttl, clock)

    raise TypeError(
        f"TTL must be an int, a timedelta or None; got {type(ttl).__name__}"
    )


def resolve_expiry(
    ttl: TTL,
    default_ttl: TTL,
    clock: Clock,
    now: Optional[int] = None,
) -> Optional[int]:
    """
    Resolve a caller TTL into an absolute expiry timestamp.
    :param now: Timestamp to resolve against; read from the clock when omitted.
    :return: Expiry timestamp, or None for "never expires".
    """
    seconds = resolve_ttl(ttl, default_ttl, clock)
    if seconds is None:
        return None
    if now is None:
        now = current_timestamp(clock)
    return now + seconds


def is_expired(expiry: Optional[int], now: int) -> bool:
    """
    Expiry check used on every read.

    An entry whose expiry equals ``now`` is already expired, so a TTL of N
    seconds keeps a value readable for strictly less than N seconds.
    """
    if expiry is None:
        return False
    return expiry <= now


__all__ = [
    "TTL",
    "current_timestamp",
    "is_expired",
    "resolve_expiry",
    "resolve_ttl",
]
