"""
Auth Router

Session issuing, identity lookup, and SMS password-reset codes.
"""
import asyncio
import hmac

from fastapi import APIRouter, Depends, HTTPException

from thermal.auth.dependencies import require_member, verify_admin_api_key
from thermal.auth.identity import Identity
from thermal.auth.session import create_web_session
from thermal.cart import KeyValueStorage
from thermal.cart.storage import get_default_storage
from thermal.db import RedisKeys, TTL
from thermal.errors import ERROR_RESET_CODE_INVALID, ERROR_SMS_FAILED, ERROR_SMS_NOT_CONFIGURED
from thermal.logging import get_logger, sanitize_id_for_logging
from thermal.services.sms import (
    SmsConfigError,
    SmsDeliveryError,
    SmsService,
    generate_reset_code,
    get_sms_service,
)
from .models import CreateSessionRequest, SmsResetRequest, SmsResetVerifyRequest

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


def get_reset_code_storage() -> KeyValueStorage:
    return get_default_storage(ttl=TTL.RESET_CODE)


def get_sms() -> SmsService:
    try:
        return get_sms_service()
    except SmsConfigError:
        raise HTTPException(status_code=503, detail=ERROR_SMS_NOT_CONFIGURED)


@router.post("/session", dependencies=[Depends(verify_admin_api_key)])
async def issue_session(request: CreateSessionRequest):
    """Issue a web session (used by the login service and admin tooling)."""
    token = create_web_session(request.user_id, request.username, request.role.value)
    logger.info(f"Issued {request.role.value} session for user {sanitize_id_for_logging(request.user_id)}")
    return {"session_token": token, "role": request.role.value}


@router.get("/me")
async def get_me(identity: Identity = Depends(require_member)):
    return identity.to_dict()


@router.post("/sms-reset")
async def request_sms_reset(
    request: SmsResetRequest,
    sms: SmsService = Depends(get_sms),
    storage: KeyValueStorage = Depends(get_reset_code_storage),
):
    """Send a six-digit reset code to the phone number."""
    key = RedisKeys.reset_code_key(request.phone)
    code = generate_reset_code()
    await asyncio.to_thread(storage.set, key, code)

    try:
        await sms.send_sms(request.phone, f"Your password reset code is: {code}")
    except SmsDeliveryError:
        await asyncio.to_thread(storage.remove, key)
        raise HTTPException(status_code=502, detail=ERROR_SMS_FAILED)

    return {"sent": True}


@router.post("/sms-reset/verify")
def verify_sms_reset(
    request: SmsResetVerifyRequest,
    storage: KeyValueStorage = Depends(get_reset_code_storage),
):
    """Check a reset code. A matching code is consumed."""
    key = RedisKeys.reset_code_key(request.phone)
    expected = storage.get(key)
    if not expected or not hmac.compare_digest(expected.encode(), request.code.encode()):
        logger.warning(f"Invalid reset code for {sanitize_id_for_logging(request.phone)}")
        raise HTTPException(status_code=400, detail=ERROR_RESET_CODE_INVALID)

    storage.remove(key)
    return {"verified": True}
