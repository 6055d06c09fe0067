# simple_cacheable/keys.py

from __future__ import annotations

from typing import Any

from simple_cacheable.exceptions import InvalidKeyError


def validate_key(key: Any, prefix: str = "") -> str:
    """
    Validate a cache key and return its storage form.

    A legal key is a non-empty string without whitespace: ``"my-key"`` and
    ``"users:42"`` pass, ``""``, ``" key"`` and ``"my key"`` do not.

    :param key: The caller-supplied key.
    :param prefix: Backend namespace prepended to the key.
    :return: The prefixed key.
    :raises InvalidKeyError: If the key is not a legal value.
    """
    if not isinstance(key, str):
        raise InvalidKeyError(key)

    if key == "" or key.strip() != key or any(ch.isspace() for ch in key):
        raise InvalidKeyError(key)

    return f"{prefix}{key}"


class KeyValidator:
    """
    Key validator bound to a backend prefix.
    Callers always pass unprefixed keys; only the backend sees the prefix.
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def validate(self, key: Any) -> str:
        return validate_key(key, self.prefix)

    def __repr__(self) -> str:
        return f"KeyValidator(prefix={self.prefix!r})"


__all__ = ["KeyValidator", "validate_key"]
