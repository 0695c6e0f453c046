"""
API Pydantic Models

Request bodies shared by the routers.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from thermal.auth.identity import Role
from thermal.members.models import MembershipStatus


# ==================== AUTH MODELS ====================

class CreateSessionRequest(BaseModel):
    user_id: str
    username: str
    role: Role = Role.MEMBER


class SmsResetRequest(BaseModel):
    phone: str = Field(min_length=5, max_length=20)


class SmsResetVerifyRequest(BaseModel):
    phone: str = Field(min_length=5, max_length=20)
    code: str = Field(pattern=r"^[0-9]{6}$")  # ASCII digits only


# ==================== CART MODELS ====================

class AddCartItemRequest(BaseModel):
    """Catalog id to add. Name and price come from the catalog."""
    id: str = Field(min_length=1)
    quantity: Optional[int] = Field(default=None, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int  # 0 or less removes the item


# ==================== MEMBER MODELS ====================

class CheckInRequest(BaseModel):
    membership_id: str = Field(min_length=1)
    location: str = Field(default="Main Entrance", max_length=100)


# ==================== ADMIN MODELS ====================

class UpsertMemberRequest(BaseModel):
    username: str = Field(min_length=1)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    role: Role = Role.MEMBER


class CreateMembershipRequest(BaseModel):
    user_id: str = Field(min_length=1)
    plan_id: str = Field(min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    auto_renew: bool = False


class UpdateMembershipRequest(BaseModel):
    status: MembershipStatus


class IssuePunchCardRequest(BaseModel):
    user_id: str = Field(min_length=1)
    option_id: str = Field(min_length=1)
