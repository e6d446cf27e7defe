"""Session store: persisted token hashes with expiry, keyed by user."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from users_api.models import UserSession

logger = logging.getLogger(__name__)


def create_session(
    db: Session,
    user_id: int,
    token_hash: str,
    expires_at: datetime | None,
) -> UserSession:
    """Add a session row without committing; the caller commits alongside related changes."""
    session_row = UserSession(
        user_id=user_id,
        token_hash=token_hash,
        created_at=datetime.now(UTC),
        expires_at=expires_at,
    )
    db.add(session_row)
    return session_row


def find_active_session(db: Session, token_hash: str) -> UserSession | None:
    """Session for this hash that has not expired (rows with no expiry never expire)."""
    now = datetime.now(UTC)
    return (
        db.query(UserSession)
        .filter(UserSession.token_hash == token_hash)
        .filter(or_(UserSession.expires_at.is_(None), UserSession.expires_at > now))
        .first()
    )


def get_session(db: Session, session_id: int) -> UserSession | None:
    return db.query(UserSession).filter(UserSession.id == session_id).first()


def list_sessions(db: Session) -> list[UserSession]:
    return db.query(UserSession).order_by(UserSession.id).all()


def list_sessions_for_user(db: Session, user_id: int) -> list[UserSession]:
    return (
        db.query(UserSession)
        .filter(UserSession.user_id == user_id)
        .order_by(UserSession.id)
        .all()
    )


def extend_session(db: Session, session_row: UserSession, minutes: int) -> UserSession:
    session_row.expires_at = datetime.now(UTC) + timedelta(minutes=minutes)
    db.commit()
    db.refresh(session_row)
    return session_row


def delete_session(db: Session, session_row: UserSession) -> None:
    db.delete(session_row)
    db.commit()


def delete_session_by_hash(db: Session, token_hash: str) -> bool:
    """Revoke the session holding this token hash. Returns False when there was none."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.token_hash == token_hash)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def delete_sessions_for_user(db: Session, user_id: int) -> int:
    deleted = (
        db.query(UserSession)
        .filter(UserSession.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Sessions revoked", extra={"user_id": user_id, "session_count": deleted})
    return deleted


def purge_expired_sessions(db: Session) -> int:
    """Delete sessions whose expiry has passed. Idempotent."""
    now = datetime.now(UTC)
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at.is_not(None))
        .filter(UserSession.expires_at <= now)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
