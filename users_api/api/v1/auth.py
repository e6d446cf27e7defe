"""Registration, login/logout (JWT or opaque session token), and credential maintenance."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from users_api.api.deps import (
    IdPath,
    get_bearer_credential,
    get_jwt_service,
    require_admin,
    require_authenticated,
)
from users_api.core.database import get_db
from users_api.core.security import JwtTokenService, generate_session_token, hash_session_token
from users_api.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from users_api.schemas.identity import IdentityContext
from users_api.schemas.preference import PreferenceRead
from users_api.schemas.user import UserRead, UserWithPreferenceRead
from users_api.services import preferences as preference_service
from users_api.services import sessions as session_service
from users_api.services import users as user_service
from users_api.services.credentials import Credential

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password."


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Public self-registration. Creates the account and its default preferences. 409 on duplicates."""
    try:
        user = user_service.create_user(db, body)
    except user_service.UserConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    preference = preference_service.create_default_preference(db, user.id)
    return RegisterResponse(
        user=UserRead.model_validate(user),
        preference=PreferenceRead.model_validate(preference),
    )


@router.post("/login", response_model=LoginResponse)
def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    jwt_service: Annotated[JwtTokenService, Depends(get_jwt_service)],
) -> LoginResponse:
    """
    Authenticate with email and password.

    token_type "jwt" (default) returns a signed access token; "session" returns an opaque
    token that is only valid while its server-side session exists. Either way the token's
    hash is recorded as a session so it can be listed and revoked.
    """
    user = user_service.authenticate(db, str(body.email), body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )
    if not user_service.is_login_allowed(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive or blocked.",
        )

    if body.token_type == "session":
        token, token_hash = generate_session_token()
        minutes = request.app.state.settings.SESSION_TOKEN_MINUTES
        expires_at = datetime.now(UTC) + timedelta(minutes=minutes)
    else:
        token = jwt_service.generate_token(user.id, user.email, user.role, user.full_name)
        token_hash = hash_session_token(token)
        expires_at = jwt_service.get_token_expiration()

    user_service.record_login(user)
    session_service.create_session(db, user.id, token_hash, expires_at)
    db.commit()
    db.refresh(user)
    logger.info("Login succeeded", extra={"user_id": user.id, "token_type": body.token_type})

    return LoginResponse(
        token=token,
        token_type=body.token_type,
        expires_at=expires_at,
        user=UserWithPreferenceRead.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    credential: Annotated[Credential | None, Depends(get_bearer_credential)],
    db: Annotated[Session, Depends(get_db)],
    body: LogoutRequest | None = None,
) -> MessageResponse:
    """
    Revoke the presented token's session, or every session of the caller with all_sessions.

    Opaque tokens stop working immediately. JWTs carry no server-side state and stay
    valid until they expire.
    """
    if body is not None and body.all_sessions:
        count = session_service.delete_sessions_for_user(db, identity.user_id)
        user = user_service.get_user(db, identity.user_id)
        if user is not None:
            user.last_login = None
            db.commit()
        return MessageResponse(message=f"Logged out of {count} session(s).")

    if credential is None:
        # Identity came from gateway headers; there is no local token to revoke.
        return MessageResponse(message="No session token presented.")
    session_service.delete_session_by_hash(db, credential.token_hash)
    return MessageResponse(message="Logged out.")


@router.get("/me", response_model=UserWithPreferenceRead)
def me(
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> UserWithPreferenceRead:
    user = user_service.get_user(db, identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserWithPreferenceRead.model_validate(user)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user = user_service.get_user(db, identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    try:
        user_service.change_password(db, user, body.current_password, body.new_password)
    except user_service.InvalidCurrentPasswordError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return MessageResponse(message="Password changed.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Set a new password for any account (admin only)."""
    user = user_service.get_user_by_email(db, str(body.email))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user_service.reset_password(db, user, body.new_password)
    return MessageResponse(message="Password reset.")


@router.post("/confirm-email/{user_id}", response_model=MessageResponse)
def confirm_email(
    user_id: IdPath,
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user_service.confirm_email(db, user)
    return MessageResponse(message="Email confirmed.")
