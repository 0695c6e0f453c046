"""
Redis Module - Upstash client

Provides a singleton sync Upstash Redis client used for:
- Session cart persistence
- SMS reset codes
- Member, membership, check-in and punch-card records
"""

import os
from typing import Optional

from upstash_redis import Redis


UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Cart storage calls are synchronous, so the sync REST client is used
    throughout.
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{session_id}
    RESET_CODE = "reset:"  # reset:{phone}
    MEMBER = "member:"  # member:{user_id}
    MEMBERS_INDEX = "members:index"
    MEMBERSHIP = "membership:"  # membership:{membership_id}
    USER_MEMBERSHIP = "membership:user:"  # membership:user:{user_id}
    CHECK_INS = "checkins"  # newest first
    PUNCH_CARD = "punchcard:"  # punchcard:{card_id}
    USER_PUNCH_CARDS = "punchcards:user:"  # punchcards:user:{user_id}

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{RedisKeys.CART}{session_id}"

    @staticmethod
    def reset_code_key(phone: str) -> str:
        return f"{RedisKeys.RESET_CODE}{phone}"

    @staticmethod
    def member_key(user_id: str) -> str:
        return f"{RedisKeys.MEMBER}{user_id}"

    @staticmethod
    def membership_key(membership_id: str) -> str:
        return f"{RedisKeys.MEMBERSHIP}{membership_id}"

    @staticmethod
    def user_membership_key(user_id: str) -> str:
        return f"{RedisKeys.USER_MEMBERSHIP}{user_id}"

    @staticmethod
    def punch_card_key(card_id: str) -> str:
        return f"{RedisKeys.PUNCH_CARD}{card_id}"

    @staticmethod
    def user_punch_cards_key(user_id: str) -> str:
        return f"{RedisKeys.USER_PUNCH_CARDS}{user_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = 86400  # 24 hours
    RESET_CODE = 900  # 15 minutes
