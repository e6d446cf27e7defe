"""Session listing and revocation."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from users_api.api.deps import IdPath, ensure_self_or_admin, require_admin, require_authenticated
from users_api.core.database import get_db
from users_api.schemas.identity import IdentityContext
from users_api.schemas.session import (
    SessionExtendRequest,
    SessionRead,
    SessionsDeletedResponse,
    SessionsListResponse,
)
from users_api.services import sessions as session_service

router = APIRouter()


def _to_list(rows) -> SessionsListResponse:
    return SessionsListResponse(sessions=[SessionRead.model_validate(s) for s in rows])


@router.get("", response_model=SessionsListResponse)
def list_sessions(
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionsListResponse:
    return _to_list(session_service.list_sessions(db))


@router.get("/user/{user_id}", response_model=SessionsListResponse)
def list_user_sessions(
    user_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionsListResponse:
    ensure_self_or_admin(identity, user_id)
    return _to_list(session_service.list_sessions_for_user(db, user_id))


@router.patch("/{session_id}", response_model=SessionRead)
def extend_session(
    session_id: IdPath,
    body: SessionExtendRequest,
    _admin: Annotated[IdentityContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionRead:
    """Move a session's expiry to now + minutes (admin only)."""
    session_row = session_service.get_session(db, session_id)
    if session_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return SessionRead.model_validate(session_service.extend_session(db, session_row, body.minutes))


@router.delete("/user/{user_id}", response_model=SessionsDeletedResponse)
def delete_user_sessions(
    user_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionsDeletedResponse:
    ensure_self_or_admin(identity, user_id)
    return SessionsDeletedResponse(deleted=session_service.delete_sessions_for_user(db, user_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: IdPath,
    identity: Annotated[IdentityContext, Depends(require_authenticated)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    session_row = session_service.get_session(db, session_id)
    # Same 404 for "not yours" as for "missing", so ids of other users' sessions don't leak.
    if session_row is None or (
        session_row.user_id != identity.user_id and not identity.is_admin
    ):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    session_service.delete_session(db, session_row)
