"""User administration and self-service profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import EmailStr
from sqlalchemy.orm import Session

from users_api.api.deps import IdPath, ensure_self_or_admin, require_admin, require_authenticated
from users_api.core.database import get_db
from users_api.models.enums import InvalidEnumValueError, UserRole, parse_enum
from users_api.schemas.identity import IdentityContext
from users_api.schemas.user import (
    AdminUserCreate,
    UserPatch,
    UserRead,
    UsersListResponse,
    UserWithPreferenceRead,
)
from users_api.services import preferences as preference_service
from users_api.services import users as user_service

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[UserRead.model_validate(u) for u in user_service.list_users(db)]
    )


@router.post("", response_model=UserWithPreferenceRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminUserCreate,
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserWithPreferenceRead:
    """Create an account with a chosen role and default preferences (admin only)."""
    try:
        role = parse_enum(UserRole, body.role)
    except InvalidEnumValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    try:
        user = user_service.create_user(db, body, role=role)
    except user_service.UserConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    preference_service.create_default_preference(db, user.id)
    db.refresh(user)
    return UserWithPreferenceRead.model_validate(user)


@router.get("/by-email", response_model=UserRead)
def get_user_by_email(
    email: Annotated[EmailStr, Query()],
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    user = user_service.get_user_by_email(db, str(email))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserWithPreferenceRead)
def get_user(
    user_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> UserWithPreferenceRead:
    ensure_self_or_admin(identity, user_id)
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserWithPreferenceRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead)
def patch_user(
    user_id: IdPath,
    body: UserPatch,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Update a profile. Users may edit themselves; role, status and email_confirmed are admin only."""
    ensure_self_or_admin(identity, user_id)
    admin_only = (body.role, body.status, body.email_confirmed)
    if not identity.is_admin and any(v is not None for v in admin_only):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can change role, status or email confirmation",
        )
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    try:
        user = user_service.update_user(db, user, body)
    except user_service.UserConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except InvalidEnumValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    return UserRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: IdPath,
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete a user together with their sessions and preferences (admin only)."""
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user_service.delete_user(db, user)
