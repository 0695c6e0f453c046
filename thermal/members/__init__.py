"""Club member records and their repository."""
from .models import (
    CheckIn,
    Member,
    Membership,
    MembershipStatus,
    PunchCard,
    PunchCardStatus,
)
from .repository import ClubRepository, get_club_repository

__all__ = [
    "CheckIn",
    "ClubRepository",
    "Member",
    "Membership",
    "MembershipStatus",
    "PunchCard",
    "PunchCardStatus",
    "get_club_repository",
]
