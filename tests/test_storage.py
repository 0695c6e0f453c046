"""
Tests for storage backends and backend selection
"""
from unittest.mock import Mock

import pytest

from thermal.cart import storage as storage_module
from thermal.cart.storage import MemoryStorage, RedisStorage, get_default_storage
from thermal.db import TTL


class TestRedisStorage:

    def test_set_with_cart_ttl(self):
        redis = Mock()
        RedisStorage(redis=redis).set("cart:abc", "[]")
        redis.set.assert_called_once_with("cart:abc", "[]", ex=TTL.CART)

    def test_set_with_custom_ttl(self):
        redis = Mock()
        RedisStorage(redis=redis, ttl=TTL.RESET_CODE).set("reset:+1555", "123456")
        redis.set.assert_called_once_with("reset:+1555", "123456", ex=TTL.RESET_CODE)

    def test_set_without_ttl(self):
        redis = Mock()
        RedisStorage(redis=redis, ttl=None).set("member:u-1", "{}")
        redis.set.assert_called_once_with("member:u-1", "{}")

    def test_get(self):
        redis = Mock()
        redis.get.return_value = "[]"
        assert RedisStorage(redis=redis).get("cart:abc") == "[]"
        redis.get.assert_called_once_with("cart:abc")

    def test_remove_deletes_key(self):
        redis = Mock()
        RedisStorage(redis=redis).remove("cart:abc")
        redis.delete.assert_called_once_with("cart:abc")

    def test_lazy_client(self, monkeypatch):
        redis = Mock()
        get_redis = Mock(return_value=redis)
        monkeypatch.setattr(storage_module, "get_redis", get_redis)

        backend = RedisStorage()
        get_redis.assert_not_called()

        backend.get("cart:abc")
        backend.get("cart:def")
        get_redis.assert_called_once()


class TestMemoryStorageTTL:

    def test_value_expires(self, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(storage_module.time, "monotonic", lambda: now[0])
        backend = MemoryStorage(ttl=TTL.RESET_CODE)

        backend.set("reset:+1555", "123456")
        now[0] += TTL.RESET_CODE - 1
        assert backend.get("reset:+1555") == "123456"

        now[0] += 1
        assert backend.get("reset:+1555") is None
        assert "reset:+1555" not in backend

    def test_no_ttl_never_expires(self, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(storage_module.time, "monotonic", lambda: now[0])
        backend = MemoryStorage()

        backend.set("member:u-1", "{}")
        now[0] += 10 * TTL.CART
        assert backend.get("member:u-1") == "{}"

    def test_initial_values_do_not_expire(self, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(storage_module.time, "monotonic", lambda: now[0])
        backend = MemoryStorage({"cart:abc": "[]"}, ttl=1)

        now[0] += 100
        assert backend.get("cart:abc") == "[]"


class TestDefaultStorage:

    @pytest.fixture
    def memory_backend(self, monkeypatch):
        monkeypatch.setattr(storage_module, "CART_STORAGE_BACKEND", "memory")
        monkeypatch.setattr(storage_module, "_memory_data", {})
        monkeypatch.setattr(storage_module, "_memory_storages", {})

    def test_memory_backend_is_shared(self, memory_backend):
        first = get_default_storage()
        second = get_default_storage()

        assert isinstance(first, MemoryStorage)
        assert first is second
        assert first.ttl == TTL.CART

    def test_memory_views_share_data(self, memory_backend):
        carts = get_default_storage()
        codes = get_default_storage(ttl=TTL.RESET_CODE)
        records = get_default_storage(ttl=None)

        carts.set("cart:abc", "[]")
        assert codes is not carts
        assert codes.ttl == TTL.RESET_CODE
        assert records.ttl is None
        assert records.get("cart:abc") == "[]"

    def test_memory_views_apply_their_own_ttl(self, memory_backend, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(storage_module.time, "monotonic", lambda: now[0])

        get_default_storage(ttl=TTL.RESET_CODE).set("reset:+1555", "123456")
        get_default_storage(ttl=None).set("member:u-1", "{}")
        now[0] += TTL.RESET_CODE

        reader = get_default_storage()
        assert reader.get("reset:+1555") is None
        assert reader.get("member:u-1") == "{}"

    @pytest.mark.parametrize("ttl", [TTL.CART, TTL.RESET_CODE, None])
    def test_redis_backend(self, monkeypatch, ttl):
        monkeypatch.setattr(storage_module, "CART_STORAGE_BACKEND", "redis")

        backend = get_default_storage(ttl=ttl)

        assert isinstance(backend, RedisStorage)
        assert backend.ttl == ttl

    def test_redis_backend_default_ttl(self, monkeypatch):
        monkeypatch.setattr(storage_module, "CART_STORAGE_BACKEND", "redis")
        assert get_default_storage().ttl == TTL.CART
