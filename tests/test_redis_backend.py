"""Tests for RedisCache using a FakeRedis command executor."""

from __future__ import annotations

from datetime import timedelta

import pytest

from simple_cacheable.backend.base import BaseCacheBackend
from simple_cacheable.backend.redis import RedisCache
from simple_cacheable.exceptions import CacheBackendError, ClockError, InvalidKeyError
from simple_cacheable.serializer import serialize

PREFIX = "test:"


@pytest.fixture
def cache(fake_redis, clock):
    return RedisCache(fake_redis, prefix=PREFIX, clock=clock)


class TestRedisHas:
    def test_is_a_cache_backend(self, cache):
        assert isinstance(cache, BaseCacheBackend)

    @pytest.mark.parametrize("key, exists, expected", [("key-01", 1, True), ("key:02", 0, False)])
    def test_has(self, cache, fake_redis, key, exists, expected):
        fake_redis.replies["EXISTS"] = exists
        assert cache.has(key) is expected
        assert fake_redis.commands == [("EXISTS", PREFIX + key)]


class TestRedisGet:
    def test_get_deserializes(self, cache, fake_redis):
        fake_redis.store[PREFIX + "key-01"] = serialize({"v": [1, 2]})
        assert cache.get("key-01", "default") == {"v": [1, 2]}
        assert fake_redis.commands == [("GET", PREFIX + "key-01")]

    def test_missing_returns_default(self, cache):
        assert cache.get("key-01", "default-value") == "default-value"
        assert cache.get("key-01") is None

    def test_stored_none_is_not_a_miss(self, cache):
        cache.set("key-01", None)
        assert cache.get("key-01", "default-value") is None
        assert cache.has("key-01") is True

    def test_corrupt_payload_is_backend_error(self, cache, fake_redis):
        fake_redis.store[PREFIX + "key-01"] = b"{not json"
        with pytest.raises(CacheBackendError):
            cache.get("key-01")

    def test_round_trip_with_span_value(self, cache):
        cache.set("key", timedelta(seconds=35))
        assert cache.get("key") == timedelta(seconds=35)


class TestRedisSet:
    @pytest.mark.parametrize(
        "ttl, extra",
        [
            (timedelta(seconds=35), ("EX", 35)),
            (3600, ("EX", 3600)),
            (None, ()),
        ],
    )
    def test_set_arguments(self, cache, fake_redis, ttl, extra):
        assert cache.set("key", "value", ttl) is True
        assert fake_redis.commands == [("SET", PREFIX + "key", serialize("value"), *extra)]

    def test_default_ttl(self, fake_redis, clock):
        cache = RedisCache(fake_redis, default_ttl=60, clock=clock)
        assert cache.set("key", "value") is True
        assert fake_redis.commands == [("SET", "key", serialize("value"), "EX", 60)]

    def test_default_span_ttl(self, fake_redis, clock):
        cache = RedisCache(fake_redis, default_ttl=timedelta(days=1), clock=clock)
        cache.set("key", "value")
        assert fake_redis.expiry["key"] == 86400

    def test_none_value_is_serialized(self, cache, fake_redis):
        cache.set("key", None)
        assert fake_redis.store[PREFIX + "key"] == serialize(None)

    @pytest.mark.parametrize("ttl", [0, -1, timedelta(seconds=-5)])
    def test_elapsed_ttl_deletes(self, cache, fake_redis, ttl):
        fake_redis.store[PREFIX + "key"] = serialize("old")
        assert cache.set("key", "value", ttl) is True
        assert fake_redis.names() == ["DEL"]
        assert cache.get("key", "default") == "default"

    @pytest.mark.parametrize("reply", [True, b"OK", "OK"])
    def test_ok_replies(self, cache, fake_redis, reply):
        fake_redis.replies["SET"] = reply
        assert cache.set("key", "value") is True

    @pytest.mark.parametrize("reply", [b"My error message", "My error message"])
    def test_status_error(self, cache, fake_redis, reply):
        fake_redis.replies["SET"] = reply
        with pytest.raises(CacheBackendError, match="My error message"):
            cache.set("key", "value")

    def test_server_error_is_wrapped(self, cache, fake_redis):
        original = ConnectionError("My error message")
        fake_redis.error = original
        with pytest.raises(CacheBackendError, match="My error message") as info:
            cache.set("key", "value")
        assert info.value.__cause__ is original

    def test_invalid_key_sends_nothing(self, cache, fake_redis):
        with pytest.raises(InvalidKeyError, match='"key "'):
            cache.set("key ", "value")
        assert fake_redis.commands == []

    @pytest.mark.parametrize("error_type", [ClockError, RuntimeError])
    def test_clock_failure_sends_nothing(self, fake_redis, error_type):
        error = error_type("My clock exception message")

        class BrokenClock:
            def now(self):
                raise error

            def at(self, instant):
                raise error

        cache = RedisCache(fake_redis, clock=BrokenClock())
        with pytest.raises(CacheBackendError, match="My clock exception message") as info:
            cache.set("key", "value", timedelta(seconds=35))
        assert info.value.__cause__ is error
        assert fake_redis.commands == []

    def test_unserializable_value(self, cache, fake_redis):
        with pytest.raises(CacheBackendError):
            cache.set("key", object())
        assert fake_redis.commands == []

    def test_msgpack_format(self, fake_redis, clock):
        cache = RedisCache(fake_redis, clock=clock, serialization_format="msgpack")
        cache.set("key", {"a": {1, 2}})
        assert cache.get("key") == {"a": {1, 2}}


class TestRedisDelete:
    def test_delete(self, fake_redis):
        cache = RedisCache(fake_redis)
        fake_redis.store["my-key"] = b"1"
        assert cache.delete("my-key") is True
        assert fake_redis.commands == [("DEL", "my-key")]

    def test_delete_missing_is_idempotent(self, cache):
        assert cache.delete("missing") is True

    def test_delete_multiple_single_command(self, cache, fake_redis):
        assert cache.delete_multiple(["a", "b", "c"]) is True
        assert fake_redis.commands == [("DEL", PREFIX + "a", PREFIX + "b", PREFIX + "c")]

    def test_delete_multiple_empty_sends_nothing(self, cache, fake_redis):
        assert cache.delete_multiple([]) is True
        assert fake_redis.commands == []

    def test_delete_multiple_validates_every_key_first(self, cache, fake_redis):
        with pytest.raises(InvalidKeyError):
            cache.delete_multiple(["a", " b"])
        assert fake_redis.commands == []

    def test_transport_failure(self, cache, fake_redis):
        fake_redis.error = OSError("connection reset")
        with pytest.raises(CacheBackendError):
            cache.delete("a")


class TestRedisClear:
    def test_clear_empty(self, cache, fake_redis):
        assert cache.clear() is True
        assert fake_redis.commands == [("KEYS", PREFIX + "*")]

    def test_clear_deletes_listed_keys_verbatim(self, fake_redis):
        fake_redis.store.update({"key1": b"1", "key2": b"2"})
        cache = RedisCache(fake_redis)
        assert cache.clear() is True
        assert fake_redis.commands == [("KEYS", "*"), ("DEL", b"key1", b"key2")]
        assert fake_redis.store == {}

    def test_clear_only_touches_prefix(self, cache, fake_redis):
        fake_redis.store["other:key"] = b"1"
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert cache.has("a") is False
        assert cache.has("b") is False
        assert list(fake_redis.store) == ["other:key"]

    def test_glob_characters_in_prefix_are_escaped(self, fake_redis):
        cache = RedisCache(fake_redis, prefix="a*b:")
        cache.clear()
        assert fake_redis.commands == [("KEYS", "a\\*b:*")]


class TestRedisBatch:
    def test_get_multiple(self, cache, fake_redis):
        fake_redis.replies["GET"] = serialize("test-val")
        assert cache.get_multiple(["key1", "key2"]) == {"key1": "test-val", "key2": "test-val"}
        assert fake_redis.names() == ["GET", "GET"]

    def test_get_multiple_default_mapping(self, cache):
        result = cache.get_multiple(["key1", "key2"], {"key1": "hello1", "key2": "hello2"})
        assert result == {"key1": "hello1", "key2": "hello2"}

    def test_get_multiple_scalar_default(self, cache):
        assert cache.get_multiple(["key1", "key2"], "hello") == {"key1": "hello", "key2": "hello"}

    def test_set_multiple(self, fake_redis):
        cache = RedisCache(fake_redis)
        assert cache.set_multiple({"key1": "hello1", "key2": "hello2"}) is True
        assert fake_redis.commands == [
            ("SET", "key1", serialize("hello1")),
            ("SET", "key2", serialize("hello2")),
        ]

    def test_set_multiple_aborts_on_error(self, cache, fake_redis):
        fake_redis.replies["SET"] = b"ERR"
        with pytest.raises(CacheBackendError):
            cache.set_multiple({"a": 1, "b": 2})
        assert fake_redis.names() == ["SET"]


class TestRedisFromUrl:
    def test_builds_client(self):
        cache = RedisCache.from_url("redis://localhost:6379/0", prefix="app:")
        assert cache.prefix == "app:"
        assert hasattr(cache.client, "execute_command")
