"""Authentication package: sessions, identity, and route gates."""
from .session import create_web_session, verify_web_session_token, revoke_web_session
from .identity import Identity, IdentityState, Role, SessionIdentityProvider
from .gate import (
    ADMIN,
    PROTECTED,
    GateDecision,
    GateOutcome,
    RouteGate,
    resolve_route,
)

__all__ = [
    "ADMIN",
    "PROTECTED",
    "GateDecision",
    "GateOutcome",
    "Identity",
    "IdentityState",
    "Role",
    "RouteGate",
    "SessionIdentityProvider",
    "create_web_session",
    "resolve_route",
    "revoke_web_session",
    "verify_web_session_token",
]
