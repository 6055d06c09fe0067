"""Shared fixtures: a frozen clock and a scripted Redis command executor."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Any

import pytest

from simple_cacheable.clock import FrozenClock
from simple_cacheable.config import CacheConfig
from simple_cacheable.serializer import get_default_format, set_default_format

START = 1_700_000_000


class FakeRedis:
    """Minimal in-memory stub answering ``execute_command`` like redis.Redis.

    Every command is recorded in ``commands``. ``replies`` overrides the
    answer for a command name, ``error`` makes every command raise.
    """

    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}
        self.expiry: dict[str, int] = {}
        self.commands: list[tuple[Any, ...]] = []
        self.replies: dict[str, Any] = {}
        self.error: Exception | None = None

    @staticmethod
    def _name(key: Any) -> str:
        return key.decode() if isinstance(key, bytes) else key

    def execute_command(self, *args: Any, **options: Any) -> Any:
        self.commands.append(args)
        if self.error is not None:
            raise self.error
        name = args[0]
        if name in self.replies:
            return self.replies[name]
        return getattr(self, f"_{name.lower()}")(*args[1:])

    def _exists(self, *keys: Any) -> int:
        return sum(1 for key in keys if self._name(key) in self.store)

    def _get(self, key: Any) -> bytes | None:
        return self.store.get(self._name(key))

    def _set(self, key: Any, value: bytes, *options: Any) -> bool:
        self.store[self._name(key)] = value
        if options:
            self.expiry[self._name(key)] = options[1]
        return True

    def _del(self, *keys: Any) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(self._name(key), None) is not None:
                removed += 1
        return removed

    def _keys(self, pattern: str) -> list[bytes]:
        return [key.encode() for key in self.store if fnmatchcase(key, pattern)]

    def names(self) -> list[str]:
        return [command[0] for command in self.commands]


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture(autouse=True)
def _reset_global_config():
    fmt = get_default_format()
    yield
    CacheConfig.reset()
    set_default_format(fmt)
