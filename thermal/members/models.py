"""Club records: members, memberships, check-ins and punch cards."""
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    FROZEN = "frozen"


class PunchCardStatus(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Member:
    user_id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    role: str = "member"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        return cls(**data)


@dataclass
class Membership:
    """A member's plan subscription. Only `active` memberships admit check-ins."""
    membership_id: str
    user_id: str
    plan_id: str
    status: MembershipStatus = MembershipStatus.ACTIVE
    start_date: date = field(default_factory=lambda: utcnow().date())
    end_date: Optional[date] = None
    auto_renew: bool = False

    def __post_init__(self):
        self.status = MembershipStatus(self.status)

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "membership_id": self.membership_id,
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "status": self.status.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "auto_renew": self.auto_renew,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Membership":
        return cls(
            membership_id=data["membership_id"],
            user_id=data["user_id"],
            plan_id=data["plan_id"],
            status=MembershipStatus(data["status"]),
            start_date=date.fromisoformat(data["start_date"]),
            end_date=date.fromisoformat(data["end_date"]) if data.get("end_date") else None,
            auto_renew=bool(data.get("auto_renew", False)),
        )


@dataclass
class CheckIn:
    id: str
    user_id: str
    membership_id: str
    checked_in_by: str
    location: str = "Main Entrance"
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "membership_id": self.membership_id,
            "checked_in_by": self.checked_in_by,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CheckIn":
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            membership_id=data["membership_id"],
            checked_in_by=data["checked_in_by"],
            location=data.get("location") or "Main Entrance",
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class PunchCard:
    """Prepaid visit package. Becomes `exhausted` when the last punch is used."""
    id: str
    user_id: str
    name: str
    total_punches: int
    remaining_punches: int
    status: PunchCardStatus = PunchCardStatus.ACTIVE
    purchased_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.status = PunchCardStatus(self.status)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "total_punches": self.total_punches,
            "remaining_punches": self.remaining_punches,
            "status": self.status.value,
            "purchased_at": self.purchased_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PunchCard":
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            name=data["name"],
            total_punches=data["total_punches"],
            remaining_punches=data["remaining_punches"],
            status=PunchCardStatus(data["status"]),
            purchased_at=datetime.fromisoformat(data["purchased_at"]),
        )
