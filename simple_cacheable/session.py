# simple_cacheable/session.py

from __future__ import annotations

from typing import Optional

from simple_cacheable.backend.base import BaseCacheBackend
from simple_cacheable.config import CacheConfig
from simple_cacheable.ttl import TTL


class CacheSessionHandler:
    """
    Session storage on top of any cache backend.

    Maps the usual session-handler lifecycle (open, read, write, destroy,
    close, gc) onto ``get``/``set``/``delete``. Every session is stored under
    ``prefix + session_id`` with the handler's TTL. ``gc`` does nothing:
    expired sessions disappear on their own.

    When no cache is given, the backend registered with
    :class:`CacheConfig` is used.
    """

    def __init__(
        self,
        cache: Optional[BaseCacheBackend] = None,
        ttl: TTL = None,
        prefix: str = "session:",
    ) -> None:
        self.cache = cache if cache is not None else CacheConfig.get_backend()
        self.ttl = ttl
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def open(self, path: str, name: str) -> bool:
        return True

    def close(self) -> bool:
        return True

    def read(self, session_id: str) -> str:
        """Session payload, or an empty string for an unknown session."""
        return self.cache.get(self._key(session_id)) or ""

    def write(self, session_id: str, data: str) -> bool:
        return self.cache.set(self._key(session_id), data, self.ttl)

    def destroy(self, session_id: str) -> bool:
        self.cache.delete(self._key(session_id))
        return True

    def gc(self, max_lifetime: int) -> bool:
        return True
