# simple_cacheable/backend/memory.py

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from .base import BaseCacheBackend
from simple_cacheable.clock import Clock, SystemClock
from simple_cacheable.keys import KeyValidator
from simple_cacheable.ttl import TTL, current_timestamp, is_expired, resolve_expiry

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    expires_at: Optional[int] = None


class InMemoryCache(BaseCacheBackend):
    """
    Process-local cache backend.

    Entries live in a dictionary owned by the instance. Expiry is lazy:
    an expired entry is removed the first time ``get`` or ``has`` sees it,
    there is no background sweep. Values are stored by reference.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        default_ttl: TTL = None,
        prefix: str = "",
    ) -> None:
        self.clock = clock or SystemClock()
        self.default_ttl = default_ttl
        self.key_validator = KeyValidator(prefix)
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def _expired(self, entry: CacheEntry) -> bool:
        if entry.expires_at is None:
            return False
        return is_expired(entry.expires_at, current_timestamp(self.clock))

    def get(self, key: str, default: Any = None) -> Any:
        cache_key = self.key_validator.validate(key)

        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return default

            if self._expired(entry):
                logger.debug("Evicting expired entry %s on read", cache_key)
                del self._entries[cache_key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        cache_key = self.key_validator.validate(key)
        now = current_timestamp(self.clock)
        expires_at = resolve_expiry(ttl, self.default_ttl, self.clock, now=now)

        with self._lock:
            if is_expired(expires_at, now):
                logger.debug("TTL for %s already elapsed; deleting instead", cache_key)
                self._entries.pop(cache_key, None)
                return True

            self._entries[cache_key] = CacheEntry(value=value, expires_at=expires_at)
        return True

    def delete(self, key: str) -> bool:
        cache_key = self.key_validator.validate(key)
        with self._lock:
            self._entries.pop(cache_key, None)
        return True

    def clear(self) -> bool:
        with self._lock:
            self._entries.clear()
        return True

    def has(self, key: str) -> bool:
        cache_key = self.key_validator.validate(key)

        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return False

            if self._expired(entry):
                logger.debug("Evicting expired entry %s on has()", cache_key)
                del self._entries[cache_key]
                return False

            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
