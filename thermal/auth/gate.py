"""
Route Access Gate

Decides what a browser session sees for a requested path, from the
identity lookup state alone:

    loading            -> LOADING placeholder bound to the path
    no identity        -> REDIRECT to the auth page
    role not permitted -> DENIED placeholder with a link home (no redirect)
    otherwise          -> RENDER the destination

Gates keep no state between calls; the caller re-resolves whenever the
identity lookup changes.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .identity import IdentityState, Role

AUTH_PATH = "/auth"
HOME_PATH = "/"

ACCESS_DENIED_MESSAGE = "You need admin or staff privileges to access this page."


class GateOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    DENIED = "denied"
    RENDER = "render"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    path: str
    redirect_to: Optional[str] = None
    home_path: Optional[str] = None
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "path": self.path,
            "redirect_to": self.redirect_to,
            "home_path": self.home_path,
            "message": self.message,
        }


@dataclass(frozen=True)
class RouteGate:
    """
    A gate instance. `required_roles=None` admits any authenticated identity.
    """
    name: str
    required_roles: Optional[FrozenSet[Role]] = None
    auth_path: str = AUTH_PATH
    home_path: str = HOME_PATH
    denied_message: str = ACCESS_DENIED_MESSAGE

    def permits(self, role: Role) -> bool:
        return self.required_roles is None or role in self.required_roles

    def resolve(self, state: IdentityState, path: str) -> GateDecision:
        if state.loading:
            return GateDecision(GateOutcome.LOADING, path)

        if state.identity is None:
            return GateDecision(GateOutcome.REDIRECT, path, redirect_to=self.auth_path)

        if not self.permits(state.identity.role):
            return GateDecision(
                GateOutcome.DENIED,
                path,
                home_path=self.home_path,
                message=self.denied_message,
            )

        return GateDecision(GateOutcome.RENDER, path)


PROTECTED = RouteGate(name="protected")
ADMIN = RouteGate(name="admin", required_roles=frozenset({Role.ADMIN, Role.STAFF}))


PUBLIC_PATHS = frozenset({
    "/auth",
    "/admin-login",
    "/forgot-password",
    "/reset-password",
    "/success",
})

ROUTES: Dict[str, RouteGate] = {
    # Member pages
    "/": PROTECTED,
    "/qr-code": PROTECTED,
    "/payments": PROTECTED,
    "/packages": PROTECTED,
    "/membership": PROTECTED,
    "/checkout": PROTECTED,
    "/test-payment": PROTECTED,
    "/thermal-treatments": PROTECTED,
    "/staff-checkin": PROTECTED,
    # Admin console
    "/admin": ADMIN,
    "/admin/members": ADMIN,
    "/admin/check-ins": ADMIN,
    "/admin/notifications": ADMIN,
    "/admin/packages": ADMIN,
    "/admin/pricing": ADMIN,
}


def normalize_path(path: str) -> str:
    path = (path or "/").split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def resolve_route(path: str, state: IdentityState) -> GateDecision:
    """Resolve a requested path against the route table."""
    path = normalize_path(path)

    if path in PUBLIC_PATHS:
        return GateDecision(GateOutcome.RENDER, path)

    gate = ROUTES.get(path)
    if gate is None:
        return GateDecision(GateOutcome.NOT_FOUND, path, home_path=HOME_PATH)

    return gate.resolve(state, path)
