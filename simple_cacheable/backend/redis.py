# simple_cacheable/backend/redis.py

import logging
import re
from collections.abc import Iterable
from typing import Any, Optional, Protocol, Union

import redis

from .base import BaseCacheBackend
from simple_cacheable.clock import Clock, SystemClock
from simple_cacheable.exceptions import CacheBackendError
from simple_cacheable.keys import KeyValidator
from simple_cacheable.serializer import SerializationFormat, deserialize, serialize
from simple_cacheable.ttl import TTL, resolve_ttl

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class CommandExecutor(Protocol):
    """
    Anything that can run a raw Redis command, e.g. ``redis.Redis``.
    """

    def execute_command(self, *args: Any, **options: Any) -> Any:
        ...


def _status_text(reply: Any) -> str:
    if isinstance(reply, bytes):
        return reply.decode("utf-8", errors="replace")
    return str(reply)


def _is_ok(reply: Any) -> bool:
    # redis-py maps the SET status to True; raw connections return b"OK"
    return reply is True or _status_text(reply) == "OK"


class RedisCache(BaseCacheBackend):
    """
    Redis cache backend implementation.

    Every operation is sent as a raw command through the injected client,
    so any object exposing ``execute_command`` can be used in its place.
    Values are serialized before storage; only a missing key is a miss.
    """

    def __init__(
        self,
        client: CommandExecutor,
        default_ttl: TTL = None,
        prefix: str = "",
        clock: Optional[Clock] = None,
        serialization_format: Optional[Union[str, SerializationFormat]] = None,
    ) -> None:
        self.client = client
        self.default_ttl = default_ttl
        self.prefix = prefix
        self.clock = clock or SystemClock()
        self.serialization_format = serialization_format
        self.key_validator = KeyValidator(prefix)

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisCache":
        """
        Build a backend around a new ``redis.Redis`` client.

        :param url: Connection URL, e.g. ``redis://localhost:6379/0``.
        :param kwargs: Forwarded to the backend constructor.
        """
        return cls(redis.Redis.from_url(url), **kwargs)

    def _execute(self, *args: Any) -> Any:
        try:
            return self.client.execute_command(*args)
        except Exception as exc:
            logger.warning("Redis command %s failed: %s", args[0], exc)
            raise CacheBackendError(str(exc)) from exc

    def has(self, key: str) -> bool:
        redis_key = self.key_validator.validate(key)
        return bool(self._execute("EXISTS", redis_key))

    def get(self, key: str, default: Any = None) -> Any:
        redis_key = self.key_validator.validate(key)
        raw = self._execute("GET", redis_key)

        if raw is None:
            return default

        try:
            return deserialize(raw, self.serialization_format)
        except ValueError as exc:
            raise CacheBackendError(str(exc)) from exc

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        redis_key = self.key_validator.validate(key)
        try:
            data = serialize(value, self.serialization_format)
        except ValueError as exc:
            raise CacheBackendError(str(exc)) from exc

        seconds = resolve_ttl(ttl, self.default_ttl, self.clock)

        if seconds is None:
            reply = self._execute("SET", redis_key, data)
        elif seconds <= 0:
            # Redis rejects a non-positive EX
            logger.debug("TTL for %s already elapsed; deleting instead", redis_key)
            self._execute("DEL", redis_key)
            return True
        else:
            reply = self._execute("SET", redis_key, data, "EX", seconds)

        if _is_ok(reply):
            return True

        raise CacheBackendError(_status_text(reply))

    def delete(self, key: str) -> bool:
        return self.delete_multiple([key])

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        redis_keys = [self.key_validator.validate(key) for key in keys]
        if not redis_keys:
            return True

        count = self._execute("DEL", *redis_keys)
        logger.debug("DEL removed %s of %d keys", count, len(redis_keys))
        return True

    def clear(self) -> bool:
        """
        Remove every key under the configured prefix.
        WARNING: Uses KEYS command (acceptable for explicit eviction).
        """
        pattern = _GLOB_SPECIAL.sub(r"\\\1", self.prefix) + "*"

        keys = self._execute("KEYS", pattern)
        if keys:
            self._execute("DEL", *keys)
        return True
