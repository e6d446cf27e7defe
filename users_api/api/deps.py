"""Shared route dependencies: token service, caller identity, and access guards."""

from functools import partial
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from users_api.core.database import get_db
from users_api.core.security import JwtTokenService
from users_api.schemas.identity import MAX_USER_ID, IdentityContext
from users_api.services.credentials import Credential, parse_bearer_credential
from users_api.services.identity import build_identity

security = HTTPBearer(auto_error=False)

# Row ids are signed 32-bit; larger path values are a 422, not a store error.
IdPath = Annotated[int, Path(gt=0, le=MAX_USER_ID)]


def get_jwt_service(request: Request) -> JwtTokenService:
    """Token service built once at startup (see create_app)."""
    return request.app.state.jwt_service


def get_bearer_credential(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Credential | None:
    if credentials is None:
        return None
    return parse_bearer_credential(credentials.credentials)


def get_identity(
    request: Request,
    credential: Annotated[Credential | None, Depends(get_bearer_credential)],
    db: Annotated[Session, Depends(get_db)],
    jwt_service: Annotated[JwtTokenService, Depends(get_jwt_service)],
) -> IdentityContext:
    """
    Dependency: caller identity for this request. Never rejects; anonymous when nothing checks out.

    The result is also kept on request.state.identity for logging and other consumers.
    """
    verify = partial(credential.verify, db, jwt_service) if credential is not None else None
    identity = build_identity(request.headers, verify)
    request.state.identity = identity
    return identity


def require_authenticated(
    identity: Annotated[IdentityContext, Depends(get_identity)],
) -> IdentityContext:
    """Dependency: 401 unless the caller was identified."""
    if not identity.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def require_admin(
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
) -> IdentityContext:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return identity


def ensure_self_or_admin(identity: IdentityContext, user_id: int) -> None:
    """403 unless the caller is the given user or an admin."""
    if identity.user_id != user_id and not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access another user's data",
        )
