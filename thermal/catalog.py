"""
Product catalog: membership plans and punch-card packages.

Prices are in cents. The cart endpoints price items from here, never from
the client.
"""
from typing import Dict, List, Optional

from thermal.cart.models import CartItem, ItemKind

MEMBERSHIP_PLANS: List[dict] = [
    {
        "id": "plan-basic",
        "plan_type": "basic",
        "name": "Basic",
        "monthly_price": 4900,
        "description": "Basic access to thermal facilities",
        "features": [
            "Thermal facilities access (6AM-10PM)",
            "5 guided sessions per month",
        ],
    },
    {
        "id": "plan-premium",
        "plan_type": "premium",
        "name": "Premium",
        "monthly_price": 8900,
        "description": "Full access to all thermal wellness facilities",
        "features": [
            "24/7 thermal facilities access",
            "Unlimited guided sessions",
            "Private sauna booking",
            "2 guest passes/month",
        ],
    },
    {
        "id": "plan-vip",
        "plan_type": "vip",
        "name": "VIP",
        "monthly_price": 12900,
        "description": "VIP access with personalized thermal therapy",
        "features": [
            "All Premium features",
            "Personalized thermal therapy sessions (2x/month)",
            "Wellness consultation",
            "4 guest passes/month",
        ],
    },
    {
        "id": "plan-daily",
        "plan_type": "daily",
        "name": "Day Pass",
        "monthly_price": 1500,
        "description": "Single day access to thermal facilities",
        "features": [
            "Full day access to thermal facilities",
            "Access to guided sessions",
            "Valid for one day only",
        ],
    },
]

PUNCH_CARD_OPTIONS: List[dict] = [
    {"id": "punch-5", "name": "5-Day Pass Package", "total_punches": 5, "total_price": 12000, "price_per_punch": 2400},
    {"id": "punch-10", "name": "10-Day Pass Package", "total_punches": 10, "total_price": 22000, "price_per_punch": 2200},
    {"id": "punch-20", "name": "20-Day Pass Package", "total_punches": 20, "total_price": 40000, "price_per_punch": 2000},
]

_PLANS_BY_ID: Dict[str, dict] = {plan["id"]: plan for plan in MEMBERSHIP_PLANS}
_PUNCH_CARDS_BY_ID: Dict[str, dict] = {option["id"]: option for option in PUNCH_CARD_OPTIONS}


def get_plan(plan_id: str) -> Optional[dict]:
    return _PLANS_BY_ID.get(plan_id)


def get_punch_card_option(option_id: str) -> Optional[dict]:
    return _PUNCH_CARDS_BY_ID.get(option_id)


def catalog_cart_item(item_id: str, quantity: Optional[int] = None) -> Optional[CartItem]:
    """Cart item for a catalog product, or None if the id is unknown."""
    plan = get_plan(item_id)
    if plan is not None:
        return CartItem(
            id=plan["id"],
            kind=ItemKind.MEMBERSHIP,
            name=plan["name"],
            description=plan["description"],
            unit_price_minor_units=plan["monthly_price"],
            quantity=1,
            payload=plan,
        )

    option = get_punch_card_option(item_id)
    if option is not None:
        return CartItem(
            id=option["id"],
            kind=ItemKind.PUNCH_CARD,
            name=option["name"],
            description=f"{option['total_punches']} visits",
            unit_price_minor_units=option["total_price"],
            quantity=quantity,
            payload=option,
        )

    return None
