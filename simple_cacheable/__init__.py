from simple_cacheable.backend.base import BaseCacheBackend
from simple_cacheable.backend.memory import CacheEntry, InMemoryCache
from simple_cacheable.backend.null import NullCache
from simple_cacheable.backend.redis import RedisCache
from simple_cacheable.clock import Clock, FrozenClock, SystemClock
from simple_cacheable.config import CacheConfig, CacheSettings, create_backend
from simple_cacheable.exceptions import (
	CacheBackendError,
	CacheConfigError,
	CacheError,
	ClockError,
	InvalidKeyError,
)
from simple_cacheable.keys import KeyValidator, validate_key
from simple_cacheable.serializer import (
	SerializationFormat,
	deserialize,
	get_default_format,
	register_serializer,
	serialize,
	set_default_format,
)
from simple_cacheable.session import CacheSessionHandler
from simple_cacheable.ttl import TTL, is_expired, resolve_expiry, resolve_ttl

__all__ = [
	"BaseCacheBackend",
	"CacheEntry",
	"InMemoryCache",
	"NullCache",
	"RedisCache",
	"Clock",
	"FrozenClock",
	"SystemClock",
	"CacheConfig",
	"CacheSettings",
	"create_backend",
	"CacheBackendError",
	"CacheConfigError",
	"CacheError",
	"ClockError",
	"InvalidKeyError",
	"KeyValidator",
	"validate_key",
	"SerializationFormat",
	"serialize",
	"deserialize",
	"get_default_format",
	"set_default_format",
	"register_serializer",
	"CacheSessionHandler",
	"TTL",
	"is_expired",
	"resolve_expiry",
	"resolve_ttl",
]
