"""
Admin Router

Staff console: members, memberships, check-in history and punch-card
issuing. Every endpoint requires the admin or staff role.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from thermal.auth.dependencies import require_staff
from thermal.catalog import get_plan, get_punch_card_option
from thermal.errors import (
    ERROR_CATALOG_ITEM_NOT_FOUND,
    ERROR_MEMBERSHIP_NOT_FOUND,
    ERROR_PLAN_NOT_FOUND,
)
from thermal.logging import get_logger, sanitize_id_for_logging
from thermal.members import ClubRepository, Member, get_club_repository
from .models import (
    CreateMembershipRequest,
    IssuePunchCardRequest,
    UpdateMembershipRequest,
    UpsertMemberRequest,
)

logger = get_logger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(require_staff)])


@router.get("/members")
def list_members(repo: ClubRepository = Depends(get_club_repository)):
    """All members, each with their current membership (or null)."""
    result = []
    for member in repo.list_members():
        membership = repo.get_membership_for_user(member.user_id)
        result.append({
            **member.to_dict(),
            "membership": membership.to_dict() if membership else None,
        })
    return result


@router.put("/members/{user_id}")
def upsert_member(
    user_id: str,
    request: UpsertMemberRequest,
    repo: ClubRepository = Depends(get_club_repository),
):
    member = Member(user_id=user_id, **request.model_dump(exclude={"role"}), role=request.role.value)
    return repo.upsert_member(member).to_dict()


@router.post("/memberships", status_code=201)
def create_membership(
    request: CreateMembershipRequest,
    repo: ClubRepository = Depends(get_club_repository),
):
    if get_plan(request.plan_id) is None:
        raise HTTPException(status_code=404, detail=ERROR_PLAN_NOT_FOUND)

    membership = repo.create_membership(
        user_id=request.user_id,
        plan_id=request.plan_id,
        start_date=request.start_date,
        end_date=request.end_date,
        auto_renew=request.auto_renew,
    )
    return membership.to_dict()


@router.patch("/memberships/{membership_id}")
def update_membership(
    membership_id: str,
    request: UpdateMembershipRequest,
    repo: ClubRepository = Depends(get_club_repository),
):
    membership = repo.update_membership_status(membership_id, request.status)
    if membership is None:
        raise HTTPException(status_code=404, detail=ERROR_MEMBERSHIP_NOT_FOUND)
    logger.info(f"Membership {membership_id} set to {membership.status.value}")
    return membership.to_dict()


@router.get("/check-ins")
def list_check_ins(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repo: ClubRepository = Depends(get_club_repository),
):
    return repo.list_check_ins(page=page, limit=limit)


@router.get("/check-ins/today")
def list_today_check_ins(repo: ClubRepository = Depends(get_club_repository)):
    return [check_in.to_dict() for check_in in repo.today_check_ins()]


@router.post("/punch-cards", status_code=201)
def issue_punch_card(
    request: IssuePunchCardRequest,
    repo: ClubRepository = Depends(get_club_repository),
):
    """Issue a purchased punch-card package to a member."""
    option = get_punch_card_option(request.option_id)
    if option is None:
        raise HTTPException(status_code=404, detail=ERROR_CATALOG_ITEM_NOT_FOUND)

    card = repo.create_punch_card(request.user_id, option["name"], option["total_punches"])
    logger.info(f"Issued {option['id']} to user {sanitize_id_for_logging(request.user_id)}")
    return card.to_dict()
