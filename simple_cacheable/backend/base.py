# simple_cacheable/backend/base.py

"""
Abstract base class for cache backends.
Defines the interface that all cache backends must implement, and the
batch operations shared by every backend.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Union

from simple_cacheable.ttl import TTL

logger = logging.getLogger(__name__)


class BaseCacheBackend(ABC):
    """
    Abstract base class for cache backends.
    All cache backends must implement this interface.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value from the cache by its key.

        :param key: The key to look up in the cache.
        :param default: Value returned when the key is not found.
        :return: The cached value, or ``default`` if not found.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """
        Set a value in the cache with an optional time-to-live (TTL).
        :param key: The key under which to store the value.
        :param value: The value to store in the cache.
        :param ttl: Seconds or a timedelta; None uses the backend default.
        :return: True on success.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a value from the cache by its key.
        Deleting a missing key is not an error.
        :param key: The key to delete from the cache.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> bool:
        """
        Remove every entry in the backend's scope.
        """
        raise NotImplementedError

    @abstractmethod
    def has(self, key: str) -> bool:
        """
        Check whether a live entry exists for the key.
        :param key: The key to look up.
        """
        raise NotImplementedError

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """
        Retrieve several values at once.

        When ``default`` is a mapping holding a requested key, that entry is
        the default for the key; otherwise ``default`` itself is used.

        :param keys: Keys to look up.
        :param default: Shared default or per-key mapping of defaults.
        :return: Mapping with exactly one entry per requested key.
        """
        result: dict[str, Any] = {}
        for key in keys:
            if isinstance(default, Mapping) and key in default:
                key_default = default[key]
            else:
                key_default = default
            result[key] = self.get(key, key_default)
        return result

    def set_multiple(
        self,
        values: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
        ttl: TTL = None,
    ) -> bool:
        """
        Store several values with the same TTL.

        Every entry is attempted; the result is False if any single ``set``
        returned False. An exception stops the batch where it occurred.

        :param values: Mapping or iterable of ``(key, value)`` pairs.
        :param ttl: TTL applied to every entry.
        """
        items = values.items() if isinstance(values, Mapping) else values

        success = True
        for key, value in items:
            result = self.set(key, value, ttl)
            success = success and result

        logger.debug("set_multiple finished on %s: %s", type(self).__name__, success)
        return success

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """
        Delete several keys.
        :param keys: Keys to delete.
        :return: True unless a single delete reported failure.
        """
        success = True
        for key in keys:
            result = self.delete(key)
            success = success and result
        return success

    def __contains__(self, key: str) -> bool:
        return self.has(key)
