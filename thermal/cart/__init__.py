"""Cart package: models, storage backends, and session store."""
from .models import CartItem, ItemKind
from .storage import CART_STORAGE_KEY, KeyValueStorage, MemoryStorage, RedisStorage
from .store import CartStore, get_cart_store

__all__ = [
    "CART_STORAGE_KEY",
    "CartItem",
    "CartStore",
    "ItemKind",
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
    "get_cart_store",
]
