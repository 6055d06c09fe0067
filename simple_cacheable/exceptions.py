class CacheError(RuntimeError):
	"""Base exception for cache-related errors."""


class InvalidKeyError(CacheError, ValueError):
	"""Raised when a cache key is empty or contains whitespace anywhere."""

	def __init__(self, key: object) -> None:
		super().__init__(f'The key string is not a legal value: "{key}".')
		self.key = key


class CacheBackendError(CacheError):
	"""Raised when the underlying storage medium reports a failure.

	The original failure is always available as ``__cause__``.
	"""


class CacheConfigError(CacheError):
	"""Raised when there is a configuration error in the cache setup."""


class ClockError(RuntimeError):
	"""Raised by a time provider that cannot produce the current instant."""


__all__ = [
	"CacheError",
	"InvalidKeyError",
	"CacheBackendError",
	"CacheConfigError",
	"ClockError",
]
