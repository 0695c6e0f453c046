"""Cart models with integer minor-unit pricing."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class ItemKind(str, Enum):
    """Kinds of purchasable products."""
    MEMBERSHIP = "membership"
    PUNCH_CARD = "punch_card"


@dataclass
class CartItem:
    """
    Single item in the cart.

    Prices are stored in cents. `payload` holds the full plan or package
    record and is carried through unmodified.
    """
    id: str
    kind: ItemKind
    name: str
    unit_price_minor_units: int
    description: str = ""
    quantity: Optional[int] = None
    payload: Any = None

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string")
        self.kind = ItemKind(self.kind)
        if isinstance(self.unit_price_minor_units, bool) or not isinstance(self.unit_price_minor_units, int):
            raise ValueError("unit_price_minor_units must be an integer")
        if self.unit_price_minor_units < 0:
            raise ValueError("unit_price_minor_units must not be negative")
        if self.quantity is None:
            self.quantity = 1
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")

    @property
    def total_price(self) -> int:
        """Total price for all units, in cents."""
        return self.unit_price_minor_units * self.quantity

    def with_quantity(self, quantity: int) -> "CartItem":
        """Copy of this item with a different quantity."""
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "description": self.description,
            "unit_price_minor_units": self.unit_price_minor_units,
            "quantity": self.quantity,
            "payload": self.payload,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from dictionary. Raises KeyError/ValueError/TypeError on malformed data."""
        return cls(
            id=data["id"],
            kind=ItemKind(data["kind"]),
            name=data["name"],
            description=data.get("description") or "",
            unit_price_minor_units=data["unit_price_minor_units"],
            quantity=data.get("quantity"),
            payload=data.get("payload"),
        )
