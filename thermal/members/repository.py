"""
Club Repository

JSON records for members, memberships, check-ins and punch cards over
the same key-value storage the cart uses. Index keys hold JSON arrays of
ids. Updates are read-modify-write without locking.
"""
import json
from datetime import date
from typing import Any, List, Optional
from uuid import uuid4

from thermal.cart.storage import KeyValueStorage, get_default_storage
from thermal.db import RedisKeys
from thermal.logging import get_logger, sanitize_id_for_logging
from .models import (
    CheckIn,
    Member,
    Membership,
    MembershipStatus,
    PunchCard,
    PunchCardStatus,
    utcnow,
)

logger = get_logger(__name__)


def _new_id() -> str:
    return uuid4().hex[:12]


class ClubRepository:
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    # ==================== JSON HELPERS ====================

    def _get_json(self, key: str) -> Any:
        raw = self.storage.get(key)
        if not raw:
            return None
        return json.loads(raw)

    def _set_json(self, key: str, value: Any) -> None:
        self.storage.set(key, json.dumps(value))

    def _get_list(self, key: str) -> List:
        return self._get_json(key) or []

    # ==================== MEMBERS ====================

    def upsert_member(self, member: Member) -> Member:
        self._set_json(RedisKeys.member_key(member.user_id), member.to_dict())
        index = self._get_list(RedisKeys.MEMBERS_INDEX)
        if member.user_id not in index:
            index.append(member.user_id)
            self._set_json(RedisKeys.MEMBERS_INDEX, index)
        return member

    def get_member(self, user_id: str) -> Optional[Member]:
        data = self._get_json(RedisKeys.member_key(user_id))
        return Member.from_dict(data) if data else None

    def list_members(self) -> List[Member]:
        members = []
        for user_id in self._get_list(RedisKeys.MEMBERS_INDEX):
            member = self.get_member(user_id)
            if member is not None:
                members.append(member)
        return members

    # ==================== MEMBERSHIPS ====================

    def create_membership(
        self,
        user_id: str,
        plan_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        auto_renew: bool = False,
    ) -> Membership:
        """Create an active membership; it becomes the user's current one."""
        membership = Membership(
            membership_id=_new_id(),
            user_id=user_id,
            plan_id=plan_id,
            start_date=start_date or utcnow().date(),
            end_date=end_date,
            auto_renew=auto_renew,
        )
        self._save_membership(membership)
        self.storage.set(RedisKeys.user_membership_key(user_id), membership.membership_id)
        logger.info(
            f"Created membership {membership.membership_id} ({plan_id}) "
            f"for user {sanitize_id_for_logging(user_id)}"
        )
        return membership

    def _save_membership(self, membership: Membership) -> None:
        self._set_json(RedisKeys.membership_key(membership.membership_id), membership.to_dict())

    def get_membership(self, membership_id: str) -> Optional[Membership]:
        data = self._get_json(RedisKeys.membership_key(membership_id))
        return Membership.from_dict(data) if data else None

    def get_membership_for_user(self, user_id: str) -> Optional[Membership]:
        membership_id = self.storage.get(RedisKeys.user_membership_key(user_id))
        return self.get_membership(membership_id) if membership_id else None

    def update_membership_status(self, membership_id: str, status: MembershipStatus) -> Optional[Membership]:
        membership = self.get_membership(membership_id)
        if membership is None:
            return None
        membership.status = MembershipStatus(status)
        self._save_membership(membership)
        return membership

    # ==================== CHECK-INS ====================

    def record_check_in(
        self,
        membership: Membership,
        checked_in_by: str,
        location: str = "Main Entrance",
    ) -> CheckIn:
        """Record a visit against an active membership. Raises ValueError otherwise."""
        if not membership.is_active:
            raise ValueError("Invalid or inactive membership")

        check_in = CheckIn(
            id=_new_id(),
            user_id=membership.user_id,
            membership_id=membership.membership_id,
            checked_in_by=checked_in_by,
            location=location,
        )
        check_ins = self._get_list(RedisKeys.CHECK_INS)
        check_ins.insert(0, check_in.to_dict())
        self._set_json(RedisKeys.CHECK_INS, check_ins)
        return check_in

    def _all_check_ins(self) -> List[CheckIn]:
        return [CheckIn.from_dict(entry) for entry in self._get_list(RedisKeys.CHECK_INS)]

    def check_ins_for_user(self, user_id: str) -> List[CheckIn]:
        return [check_in for check_in in self._all_check_ins() if check_in.user_id == user_id]

    def list_check_ins(self, page: int = 1, limit: int = 10) -> dict:
        """Newest-first page of all check-ins."""
        check_ins = self._all_check_ins()
        start = (page - 1) * limit
        return {
            "data": [check_in.to_dict() for check_in in check_ins[start:start + limit]],
            "total": len(check_ins),
            "page": page,
            "limit": limit,
        }

    def today_check_ins(self) -> List[CheckIn]:
        today = utcnow().date()
        return [check_in for check_in in self._all_check_ins() if check_in.timestamp.date() == today]

    # ==================== PUNCH CARDS ====================

    def create_punch_card(self, user_id: str, name: str, total_punches: int) -> PunchCard:
        card = PunchCard(
            id=_new_id(),
            user_id=user_id,
            name=name,
            total_punches=total_punches,
            remaining_punches=total_punches,
        )
        self._set_json(RedisKeys.punch_card_key(card.id), card.to_dict())
        key = RedisKeys.user_punch_cards_key(user_id)
        self._set_json(key, self._get_list(key) + [card.id])
        return card

    def get_punch_card(self, card_id: str) -> Optional[PunchCard]:
        data = self._get_json(RedisKeys.punch_card_key(card_id))
        return PunchCard.from_dict(data) if data else None

    def punch_cards_for_user(self, user_id: str) -> List[PunchCard]:
        cards = []
        for card_id in self._get_list(RedisKeys.user_punch_cards_key(user_id)):
            card = self.get_punch_card(card_id)
            if card is not None:
                cards.append(card)
        return cards

    def use_punch(self, card: PunchCard) -> PunchCard:
        """Use one visit. Raises ValueError when the card is not active or has none left."""
        if card.status != PunchCardStatus.ACTIVE:
            raise ValueError("Punch card is not active")
        if card.remaining_punches <= 0:
            raise ValueError("No punches remaining on this card")

        card.remaining_punches -= 1
        if card.remaining_punches == 0:
            card.status = PunchCardStatus.EXHAUSTED
        self._set_json(RedisKeys.punch_card_key(card.id), card.to_dict())
        return card


def get_club_repository() -> ClubRepository:
    """Repository over the configured backend. Club records do not expire."""
    return ClubRepository(get_default_storage(ttl=None))
