# simple_cacheable/backend/null.py

from collections.abc import Iterable, Mapping
from typing import Any, Union

from .base import BaseCacheBackend
from simple_cacheable.ttl import TTL


class NullCache(BaseCacheBackend):
    """
    Cache backend that stores nothing.

    Every mutating call returns the flag configured for it, ``get`` returns
    the caller's default. Keys are never validated and nothing is raised,
    so it can stand in for a real backend when caching is switched off.
    """

    def __init__(
        self,
        return_on_set: bool = False,
        return_on_delete: bool = False,
        return_on_clear: bool = False,
        return_on_has: bool = False,
    ) -> None:
        self.return_on_set = return_on_set
        self.return_on_delete = return_on_delete
        self.return_on_clear = return_on_clear
        self.return_on_has = return_on_has

    def get(self, key: str, default: Any = None) -> Any:
        return default

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        return self.return_on_set

    def delete(self, key: str) -> bool:
        return self.return_on_delete

    def clear(self) -> bool:
        return self.return_on_clear

    def has(self, key: str) -> bool:
        return self.return_on_has

    def set_multiple(
        self,
        values: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
        ttl: TTL = None,
    ) -> bool:
        return self.return_on_set

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        return self.return_on_delete
