"""Expired-session cleanup: delete session rows whose expiry has passed."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from users_api.services.sessions import purge_expired_sessions

if TYPE_CHECKING:
    from users_api.core.config import Settings

logger = logging.getLogger(__name__)


def run_session_cleanup(session: Session, settings: "Settings") -> int:
    """
    Delete expired sessions and return how many were removed.

    Sessions without an expiry are kept. Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_CLEANUP_ENABLED:
        logger.info("Session cleanup is disabled (SESSION_CLEANUP_ENABLED=false); skipping.")
        return 0

    deleted_count = purge_expired_sessions(session)
    if deleted_count > 0:
        logger.info("Session cleanup run: sessions_deleted=%s", deleted_count)
    return deleted_count
