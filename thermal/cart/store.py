"""Session cart store backed by injected key-value storage."""
import json
from typing import List, Optional, Tuple

from thermal.logging import get_logger, sanitize_string_for_logging
from .models import CartItem, ItemKind
from .storage import CART_STORAGE_KEY, KeyValueStorage, RedisKeys, get_default_storage

logger = get_logger(__name__)


class CartStore:
    """
    Holds the membership plan and punch-card packages a visitor intends to buy.

    Features:
    - At most one membership; adding another replaces it
    - Punch cards with the same id merge by summing quantities
    - Loaded lazily from storage on first use, written back after every
      mutation that changes content
    - Storage failures never reach the caller; memory stays authoritative
    """

    def __init__(self, storage: KeyValueStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._items: Optional[List[CartItem]] = None

    # ==================== PERSISTENCE ====================

    def _load(self) -> List[CartItem]:
        """Read items from storage; any failure yields an empty cart."""
        try:
            raw = self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read cart {sanitize_string_for_logging(self.key)}: {e}")
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected list, got {type(data).__name__}")
            return [CartItem.from_dict(entry) for entry in data]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Corrupted cart data under {sanitize_string_for_logging(self.key)}: {e}")
            return []

    def _ensure_loaded(self) -> List[CartItem]:
        if self._items is None:
            self._items = self._load()
        return self._items

    def _save(self) -> None:
        try:
            self.storage.set(self.key, json.dumps([item.to_dict() for item in self._items]))
        except Exception as e:
            logger.error(f"Failed to save cart {sanitize_string_for_logging(self.key)}: {e}")

    def _commit(self, items: List[CartItem]) -> None:
        """Replace the item sequence, persisting only when content changed."""
        if items == self._ensure_loaded():
            return
        self._items = items
        self._save()

    # ==================== MUTATIONS ====================

    def add_item(self, item: CartItem) -> None:
        """Add a membership (replacing any other) or a punch card (merging by id)."""
        current = self._ensure_loaded()

        if item.kind == ItemKind.MEMBERSHIP:
            items = [existing for existing in current if existing.kind != ItemKind.MEMBERSHIP]
            items.append(item.with_quantity(1))
            self._commit(items)
            return

        incoming = item.quantity or 1
        if any(existing.id == item.id for existing in current):
            items = [
                existing.with_quantity(existing.quantity + incoming) if existing.id == item.id else existing
                for existing in current
            ]
        else:
            items = current + [item.with_quantity(incoming)]
        self._commit(items)

    def remove_item(self, item_id: str) -> None:
        """Remove every item with this id. Unknown ids are ignored."""
        current = self._ensure_loaded()
        self._commit([item for item in current if item.id != item_id])

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Set an item's quantity; zero or negative removes it."""
        if quantity <= 0:
            self.remove_item(item_id)
            return

        current = self._ensure_loaded()
        self._commit([
            item.with_quantity(quantity) if item.id == item_id else item
            for item in current
        ])

    def clear_cart(self) -> None:
        """Empty the cart and delete its persisted value."""
        self._items = []
        try:
            self.storage.remove(self.key)
        except Exception as e:
            logger.error(f"Failed to clear cart {sanitize_string_for_logging(self.key)}: {e}")

    # ==================== QUERIES ====================

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return tuple(self._ensure_loaded())

    def get_total_price(self) -> int:
        """Sum of unit price times quantity, in cents."""
        return sum(item.total_price for item in self._ensure_loaded())

    def get_item_count(self) -> int:
        """Number of units in the cart (not distinct entries)."""
        return sum(item.quantity for item in self._ensure_loaded())

    def has_membership(self) -> bool:
        return any(item.kind == ItemKind.MEMBERSHIP for item in self._ensure_loaded())

    def summary(self) -> dict:
        """Cart state as returned by the HTTP endpoints."""
        items = self._ensure_loaded()
        return {
            "items": [
                {**item.to_dict(), "total_price": item.total_price}
                for item in items
            ],
            "item_count": self.get_item_count(),
            "total_price": self.get_total_price(),
            "has_membership": self.has_membership(),
            "is_empty": not items,
        }


def get_cart_store(session_id: str, storage: Optional[KeyValueStorage] = None) -> CartStore:
    """Build a cart store for one browser session."""
    if storage is None:
        storage = get_default_storage()
    return CartStore(storage, key=RedisKeys.cart_key(session_id))
