"""Identity types and the session-backed identity provider."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from thermal.logging import get_logger, sanitize_id_for_logging
from .session import verify_web_session_token

logger = get_logger(__name__)


class Role(str, Enum):
    """Authorization tiers."""
    MEMBER = "member"
    STAFF = "staff"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    user_id: str
    username: str
    role: Role

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "username": self.username, "role": self.role.value}


@dataclass(frozen=True)
class IdentityState:
    """
    Tri-state identity lookup result.

    loading=True   lookup pending
    identity=None  resolved, unauthenticated
    identity set   resolved, authenticated
    """
    loading: bool = False
    identity: Optional[Identity] = None

    @classmethod
    def pending(cls) -> "IdentityState":
        return cls(loading=True)

    @classmethod
    def anonymous(cls) -> "IdentityState":
        return cls()

    @classmethod
    def of(cls, identity: Identity) -> "IdentityState":
        return cls(identity=identity)


class SessionIdentityProvider:
    """Resolves bearer session tokens to identities."""

    def lookup(self, token: Optional[str]) -> IdentityState:
        if not token:
            return IdentityState.anonymous()

        session = verify_web_session_token(token)
        if not session:
            return IdentityState.anonymous()

        try:
            role = Role(session["role"])
        except ValueError:
            logger.warning(
                f"Session {sanitize_id_for_logging(token)} carries unknown role {session['role']!r}"
            )
            return IdentityState.anonymous()

        return IdentityState.of(Identity(
            user_id=session["user_id"],
            username=session["username"],
            role=role,
        ))


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None
