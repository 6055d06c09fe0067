# simple_cacheable/config.py

import logging
import os
from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from simple_cacheable.backend.base import BaseCacheBackend
from simple_cacheable.backend.memory import InMemoryCache
from simple_cacheable.backend.null import NullCache
from simple_cacheable.backend.redis import CommandExecutor, RedisCache
from simple_cacheable.clock import Clock
from simple_cacheable.exceptions import CacheConfigError
from simple_cacheable.serializer import (
    SerializationFormat,
    get_default_format,
    set_default_format,
)

logger = logging.getLogger(__name__)


class CacheSettings(BaseModel):
    """
    Declarative backend settings, usually read from the environment.
    """

    backend: Literal["memory", "null", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    prefix: str = ""
    default_ttl: Optional[int] = Field(default=None, description="Seconds")
    serialization_format: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CacheSettings":
        """
        Build settings from ``CACHE_*`` / ``REDIS_URL`` variables.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``

        Raises:
            CacheConfigError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        names = {
            "backend": "CACHE_BACKEND",
            "redis_url": "REDIS_URL",
            "prefix": "CACHE_PREFIX",
            "default_ttl": "CACHE_DEFAULT_TTL",
            "serialization_format": "CACHE_SERIALIZATION_FORMAT",
        }
        values: dict[str, Any] = {
            field: env[var] for field, var in names.items() if env.get(var)
        }
        try:
            return cls(**values)
        except ValidationError as exc:
            raise CacheConfigError(f"Invalid cache settings: {exc}") from exc


def create_backend(
    settings: CacheSettings,
    *,
    clock: Optional[Clock] = None,
    client: Optional[CommandExecutor] = None,
) -> BaseCacheBackend:
    """
    Instantiate the backend described by ``settings``.

    Args:
        settings: Backend settings
        clock: Optional time provider (memory and redis backends)
        client: Optional pre-built Redis client; a new one is created from
            ``settings.redis_url`` otherwise

    Returns:
        Configured cache backend
    """
    logger.debug("Creating %s cache backend", settings.backend)

    if settings.backend == "null":
        return NullCache()

    if settings.backend == "memory":
        return InMemoryCache(
            clock=clock,
            default_ttl=settings.default_ttl,
            prefix=settings.prefix,
        )

    options: dict[str, Any] = {
        "default_ttl": settings.default_ttl,
        "prefix": settings.prefix,
        "clock": clock,
        "serialization_format": settings.serialization_format,
    }
    if client is not None:
        return RedisCache(client, **options)
    return RedisCache.from_url(settings.redis_url, **options)


class CacheConfig:
    """
    Global cache configuration holder.

    This class manages the application-wide cache backend and default
    serialization behavior.
    """

    _backend: Optional[BaseCacheBackend] = None
    _initialized: bool = False

    @classmethod
    def init(
        cls,
        backend: BaseCacheBackend,
        *,
        default_serialization_format: Optional[SerializationFormat] = None,
    ) -> None:
        """
        Initialize the cache configuration.

        This MUST be called once at application startup.

        Args:
            backend: Cache backend implementation (e.g. RedisCache)
            default_serialization_format: Optional default serialization format

        Raises:
            CacheConfigError: If backend is invalid or config already initialized
        """
        if cls._initialized:
            raise CacheConfigError("CacheConfig is already initialized.")

        if not isinstance(backend, BaseCacheBackend):
            raise CacheConfigError(
                "Provided backend does not implement BaseCacheBackend."
            )

        cls._backend = backend
        if default_serialization_format is not None:
            set_default_format(default_serialization_format)
        cls._initialized = True
        logger.info(
            "Cache initialized with %s (serialization: %s)",
            type(backend).__name__,
            get_default_format(),
        )

    @classmethod
    def is_initialized(cls) -> bool:
        """Check whether the cache configuration is initialized."""
        return cls._initialized

    @classmethod
    def get_backend(cls) -> BaseCacheBackend:
        """
        Get the configured cache backend.

        Raises:
            CacheConfigError: If config is not initialized

        Returns:
            Configured cache backend
        """
        if not cls._initialized or cls._backend is None:
            raise CacheConfigError(
                "CacheConfig is not initialized. Call CacheConfig.init() first."
            )
        return cls._backend

    @classmethod
    def reset(cls) -> None:
        """
        Reset cache configuration.

        Intended for testing ONLY.
        """
        cls._backend = None
        cls._initialized = False
