"""FastAPI dependencies that apply the route gates to API endpoints.

Usage:
    @router.get("/members")
    async def list_members(identity: Identity = Depends(require_staff)):
        ...
"""
import os
import secrets

from fastapi import Depends, Header, HTTPException

from thermal.errors import ERROR_ADMIN_KEY_INVALID, ERROR_STAFF_REQUIRED, ERROR_UNAUTHORIZED
from .gate import ADMIN, PROTECTED, RouteGate
from .identity import Identity, IdentityState, SessionIdentityProvider, parse_bearer_token

_identity_provider = SessionIdentityProvider()


def get_identity_provider() -> SessionIdentityProvider:
    return _identity_provider


async def get_identity_state(
    authorization: str = Header(None, alias="Authorization"),
    provider: SessionIdentityProvider = Depends(get_identity_provider),
) -> IdentityState:
    """Identity lookup for the current request (never pending server-side)."""
    return provider.lookup(parse_bearer_token(authorization))


def _enforce(gate: RouteGate, state: IdentityState) -> Identity:
    if state.identity is None:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)
    if not gate.permits(state.identity.role):
        raise HTTPException(status_code=403, detail=ERROR_STAFF_REQUIRED)
    return state.identity


async def require_member(state: IdentityState = Depends(get_identity_state)) -> Identity:
    """Any authenticated identity."""
    return _enforce(PROTECTED, state)


async def require_staff(state: IdentityState = Depends(get_identity_state)) -> Identity:
    """Admin or staff identity."""
    return _enforce(ADMIN, state)


async def verify_admin_api_key(authorization: str = Header(None, alias="Authorization")) -> None:
    """Check `Authorization: Bearer <ADMIN_API_KEY>` for session-issuing tools."""
    expected = os.environ.get("ADMIN_API_KEY", "")
    token = parse_bearer_token(authorization)
    if not expected or not token or not secrets.compare_digest(token, expected):
        raise HTTPException(status_code=401, detail=ERROR_ADMIN_KEY_INVALID)
