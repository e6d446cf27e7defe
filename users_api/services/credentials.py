"""
Bearer credentials presented in the Authorization header.

Two kinds exist: self-contained JWTs and legacy opaque session tokens. Both
expose verify(), so callers get an IdentityContext without knowing which kind
authenticated the request.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from users_api.core.security import JwtTokenService, hash_session_token
from users_api.models.enums import UserStatus
from users_api.schemas.identity import ANONYMOUS, IdentityContext, parse_user_id
from users_api.services.sessions import find_active_session

logger = logging.getLogger(__name__)

# Claim names a user id or role may arrive under, in lookup order.
ID_CLAIMS = (
    "sub",
    "nameid",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
)
ROLE_CLAIMS = (
    "role",
    "http://schemas.microsoft.com/ws/2008/06/identity/claims/role",
)


def _first_claim(claims: dict[str, Any], names: tuple[str, ...]) -> str:
    for name in names:
        value = claims.get(name)
        if value not in (None, ""):
            return str(value)
    return ""


def identity_from_claims(claims: dict[str, Any]) -> IdentityContext | None:
    """Identity from verified JWT claims, or None when no claim holds a storable user id."""
    raw_id = _first_claim(claims, ID_CLAIMS)
    user_id = parse_user_id(raw_id)
    if user_id is None:
        return None
    return IdentityContext(
        user_id=user_id,
        email=_first_claim(claims, ("email",)),
        role=_first_claim(claims, ROLE_CLAIMS),
        user_name=_first_claim(claims, ("name",)),
        source="jwt",
    )


@dataclass(frozen=True)
class JwtCredential:
    token: str

    def verify(self, db: Session, jwt_service: JwtTokenService) -> IdentityContext:
        """Signature and claims only: no store lookup, so logout does not revoke a JWT."""
        claims = jwt_service.validate_token(self.token)
        if claims is None:
            return ANONYMOUS
        return identity_from_claims(claims) or ANONYMOUS

    @property
    def token_hash(self) -> str:
        return hash_session_token(self.token)


@dataclass(frozen=True)
class SessionTokenCredential:
    token: str

    def verify(self, db: Session, jwt_service: JwtTokenService) -> IdentityContext:
        """Valid only while an unexpired session row holds this token's hash and the user is active."""
        session_row = find_active_session(db, self.token_hash)
        if session_row is None:
            return ANONYMOUS
        user = session_row.user
        if user is None or user.status != UserStatus.ACTIVE.value:
            logger.info(
                "Session token presented for inactive user",
                extra={"user_id": session_row.user_id},
            )
            return ANONYMOUS
        return IdentityContext(
            user_id=user.id,
            email=user.email,
            role=user.role,
            user_name=user.full_name,
            source="session",
        )

    @property
    def token_hash(self) -> str:
        return hash_session_token(self.token)


Credential = JwtCredential | SessionTokenCredential


def parse_bearer_credential(token: str | None) -> Credential | None:
    """Classify a bearer string: three dot-separated segments is a JWT, anything else opaque."""
    if token is None:
        return None
    token = token.strip()
    if not token or any(c.isspace() for c in token):
        return None
    if token.count(".") == 2:
        return JwtCredential(token)
    return SessionTokenCredential(token)
