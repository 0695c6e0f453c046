"""
Member Router

Membership status, check-ins, punch cards and the check-in QR pass.
"""
import os

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from thermal.auth.dependencies import require_member
from thermal.auth.identity import Identity, Role
from thermal.errors import (
    ERROR_CHECK_IN_FORBIDDEN,
    ERROR_MEMBERSHIP_INACTIVE,
    ERROR_MEMBERSHIP_NOT_FOUND,
    ERROR_PUNCH_CARD_FORBIDDEN,
    ERROR_PUNCH_CARD_NOT_FOUND,
    ERROR_QR_FAILED,
)
from thermal.logging import get_logger, sanitize_id_for_logging
from thermal.members import ClubRepository, get_club_repository
from thermal.services.qr import render_qr_png
from .models import CheckInRequest

logger = get_logger(__name__)

router = APIRouter(tags=["member"])

QR_CODE_SIZE = int(os.environ.get("QR_CODE_SIZE", "200"))

STAFF_ROLES = frozenset({Role.STAFF, Role.ADMIN})


@router.get("/membership")
def get_my_membership(
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    membership = repo.get_membership_for_user(identity.user_id)
    if membership is None:
        raise HTTPException(status_code=404, detail=ERROR_MEMBERSHIP_NOT_FOUND)
    return membership.to_dict()


@router.get("/check-ins")
def get_my_check_ins(
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    return [check_in.to_dict() for check_in in repo.check_ins_for_user(identity.user_id)]


@router.post("/check-in", status_code=201)
def check_in(
    request: CheckInRequest,
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    """
    Record a visit for a scanned membership.

    Staff at the front desk may check in any member; members only
    themselves. The visit belongs to the membership's owner.
    """
    membership = repo.get_membership(request.membership_id)
    if membership is None or not membership.is_active:
        raise HTTPException(status_code=400, detail=ERROR_MEMBERSHIP_INACTIVE)

    if identity.role not in STAFF_ROLES and membership.user_id != identity.user_id:
        raise HTTPException(status_code=403, detail=ERROR_CHECK_IN_FORBIDDEN)

    entry = repo.record_check_in(membership, checked_in_by=identity.user_id, location=request.location)
    logger.info(
        f"Check-in for user {sanitize_id_for_logging(membership.user_id)} "
        f"by {sanitize_id_for_logging(identity.user_id)}"
    )
    return entry.to_dict()


@router.get("/punch-cards")
def get_my_punch_cards(
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    return [card.to_dict() for card in repo.punch_cards_for_user(identity.user_id)]


@router.post("/punch-cards/{card_id}/use")
def use_punch_card(
    card_id: str,
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    card = repo.get_punch_card(card_id)
    if card is None:
        raise HTTPException(status_code=404, detail=ERROR_PUNCH_CARD_NOT_FOUND)
    if card.user_id != identity.user_id:
        raise HTTPException(status_code=403, detail=ERROR_PUNCH_CARD_FORBIDDEN)

    try:
        card = repo.use_punch(card)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return card.to_dict()


@router.get("/member/qr.png")
def member_qr_code(
    identity: Identity = Depends(require_member),
    repo: ClubRepository = Depends(get_club_repository),
):
    """PNG QR code encoding the membership id, scanned at the front desk."""
    membership = repo.get_membership_for_user(identity.user_id)
    if membership is None:
        raise HTTPException(status_code=404, detail=ERROR_MEMBERSHIP_NOT_FOUND)

    png = render_qr_png(membership.membership_id, size=QR_CODE_SIZE, include_margin=True)
    if not png:
        raise HTTPException(status_code=500, detail=ERROR_QR_FAILED)
    return Response(content=png, media_type="image/png", headers={"Cache-Control": "no-store"})
