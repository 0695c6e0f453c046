"""Durable key-value storage backends for the session cart and club records."""
import os
import time
from typing import Dict, Optional, Protocol, Tuple

from thermal.db import get_redis, RedisKeys, TTL

CART_STORAGE_KEY = "thermal-cart"
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "redis").lower()


class KeyValueStorage(Protocol):
    """Minimal string key-value interface the cart persists through."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """
    Dict-backed storage for tests and local development.

    With `ttl` set, values written through this instance expire after
    `ttl` seconds. Several instances may share one `data` dict.
    """

    def __init__(
        self,
        initial: Optional[Dict[str, str]] = None,
        ttl: Optional[int] = None,
        data: Optional[Dict[str, Tuple[str, Optional[float]]]] = None,
    ):
        self._data: Dict[str, Tuple[str, Optional[float]]] = data if data is not None else {}
        self.ttl = ttl
        for key, value in (initial or {}).items():
            self._data[key] = (value, None)

    def get(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            self._data.pop(key, None)
            return None
        return value

    def set(self, key: str, value: str) -> None:
        expires_at = time.monotonic() + self.ttl if self.ttl else None
        self._data[key] = (value, expires_at)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class RedisStorage:
    """
    Upstash Redis storage.

    Values expire after `ttl` seconds so abandoned carts are dropped;
    `ttl=None` keeps them until removed.
    """

    def __init__(self, redis=None, ttl: Optional[int] = TTL.CART):
        self._redis = redis
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def get(self, key: str) -> Optional[str]:
        return self.redis.get(key)

    def set(self, key: str, value: str) -> None:
        if self.ttl:
            self.redis.set(key, value, ex=self.ttl)
        else:
            self.redis.set(key, value)

    def remove(self, key: str) -> None:
        self.redis.delete(key)


# Process-wide data behind the memory backend, one view per TTL
_memory_data: Dict[str, Tuple[str, Optional[float]]] = {}
_memory_storages: Dict[Optional[int], MemoryStorage] = {}


def get_default_storage(ttl: Optional[int] = TTL.CART) -> KeyValueStorage:
    """Storage backend selected by CART_STORAGE_BACKEND (memory data is process-wide)."""
    if CART_STORAGE_BACKEND == "memory":
        if ttl not in _memory_storages:
            _memory_storages[ttl] = MemoryStorage(ttl=ttl, data=_memory_data)
        return _memory_storages[ttl]
    return RedisStorage(ttl=ttl)


__all__ = [
    "CART_STORAGE_KEY",
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
    "RedisKeys",
    "get_default_storage",
]
