"""Per-user accessibility preferences."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from users_api.api.deps import IdPath, ensure_self_or_admin, require_authenticated
from users_api.core.database import get_db
from users_api.models.enums import InvalidEnumValueError
from users_api.schemas.identity import IdentityContext
from users_api.schemas.preference import PreferenceCreate, PreferenceFields, PreferenceRead
from users_api.services import preferences as preference_service
from users_api.services import users as user_service

router = APIRouter()


def _invalid_value(e: InvalidEnumValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)


@router.post("", response_model=PreferenceRead, status_code=status.HTTP_201_CREATED)
def create_preference(
    body: PreferenceCreate,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> PreferenceRead:
    ensure_self_or_admin(identity, body.user_id)
    if user_service.get_user(db, body.user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    try:
        preference = preference_service.create_preference(db, body)
    except preference_service.PreferenceAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except InvalidEnumValueError as e:
        raise _invalid_value(e) from e
    return PreferenceRead.model_validate(preference)


@router.get("/user/{user_id}", response_model=PreferenceRead)
def get_preference(
    user_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> PreferenceRead:
    ensure_self_or_admin(identity, user_id)
    preference = preference_service.get_preference_for_user(db, user_id)
    if preference is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preferences not found")
    return PreferenceRead.model_validate(preference)


@router.patch("/user/{user_id}", response_model=PreferenceRead)
def patch_preference(
    user_id: IdPath,
    body: PreferenceFields,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> PreferenceRead:
    ensure_self_or_admin(identity, user_id)
    preference = preference_service.get_preference_for_user(db, user_id)
    if preference is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preferences not found")
    try:
        preference = preference_service.update_preference(db, preference, body)
    except InvalidEnumValueError as e:
        raise _invalid_value(e) from e
    return PreferenceRead.model_validate(preference)


@router.delete("/user/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_preference(
    user_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    ensure_self_or_admin(identity, user_id)
    preference = preference_service.get_preference_for_user(db, user_id)
    if preference is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preferences not found")
    preference_service.delete_preference(db, preference)
