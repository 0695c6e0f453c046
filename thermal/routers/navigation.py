"""
Navigation Router

Lets the browser ask which view to show for a path before rendering it.
"""
from fastapi import APIRouter, Depends, Query

from thermal.auth.dependencies import get_identity_state
from thermal.auth.gate import resolve_route
from thermal.auth.identity import IdentityState

router = APIRouter(tags=["navigation"])


@router.get("/navigation")
async def resolve_navigation(
    path: str = Query("/"),
    state: IdentityState = Depends(get_identity_state),
):
    """Gate decision for `path` and the caller's identity."""
    decision = resolve_route(path, state)
    result = decision.to_dict()
    result["identity"] = state.identity.to_dict() if state.identity else None
    return result
