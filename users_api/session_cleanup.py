"""
Purge expired sessions. Meant for cron, e.g. hourly:

  0 * * * * cd /srv/users-api && .venv/bin/python -m users_api.session_cleanup

Exit status 0 on success, 1 when the purge failed.
"""

import argparse
import logging
import sys

from sqlalchemy.orm import Session, sessionmaker

from users_api.core.config import get_settings
from users_api.core.database import SessionLocal, build_engine
from users_api.services.session_cleanup import run_session_cleanup

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def _open_session(database_url: str | None) -> Session:
    if database_url is None:
        return SessionLocal()
    return sessionmaker(autocommit=False, autoflush=False, bind=build_engine(database_url))()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete sessions whose expiry has passed.")
    parser.add_argument("--database-url", help="Override DATABASE_URL for this run")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Run even when SESSION_CLEANUP_ENABLED is false",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.force:
        settings = settings.model_copy(update={"SESSION_CLEANUP_ENABLED": True})

    db = _open_session(args.database_url)
    try:
        deleted = run_session_cleanup(db, settings)
    except Exception:
        logger.exception("Session cleanup failed")
        return 1
    finally:
        db.close()
    logger.info("Session cleanup finished: sessions_deleted=%s", deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
