"""Unit and integration tests for expired-session cleanup: run_session_cleanup and its CLI."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from sqlalchemy.orm import sessionmaker

from users_api import session_cleanup as cleanup_cli
from users_api.core.database import build_engine
from users_api.core.security import hash_session_token
from users_api.models import Base, User, UserSession
from users_api.services.session_cleanup import run_session_cleanup
from tests.helpers import make_settings


def _settings(enabled: bool = True) -> MagicMock:
    settings = MagicMock()
    settings.SESSION_CLEANUP_ENABLED = enabled
    return settings


class TestCleanupDisabled(unittest.TestCase):
    """When SESSION_CLEANUP_ENABLED is False, run_session_cleanup does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        session = MagicMock()
        self.assertEqual(run_session_cleanup(session, _settings(enabled=False)), 0)
        session.query.assert_not_called()
        session.commit.assert_not_called()


class TestCleanupDeletes(unittest.TestCase):
    """With cleanup enabled, the delete count is returned and committed."""

    def test_no_expired_sessions(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.filter.return_value.delete.return_value = 0
        self.assertEqual(run_session_cleanup(session, _settings()), 0)
        session.commit.assert_called_once()

    def test_deletes_expired_sessions(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.filter.return_value.delete.return_value = 3
        self.assertEqual(run_session_cleanup(session, _settings()), 3)
        session.add.assert_not_called()
        session.commit.assert_called_once()


class TestCleanupIntegration(unittest.TestCase):
    """Against an in-memory SQLite store: only rows past their expiry go."""

    def setUp(self) -> None:
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
        user = User(
            nickname="erin",
            name="Erin",
            lastname="Hale",
            email="erin@example.com",
            password="$2b$04$notarealhashnotarealhashnotarealhashnotarealhashnotr",
        )
        self.db.add(user)
        self.db.commit()
        now = datetime.now(UTC)
        for label, expires_at in (
            ("expired", now - timedelta(minutes=5)),
            ("long-expired", now - timedelta(days=30)),
            ("live", now + timedelta(hours=1)),
            ("no-expiry", None),
        ):
            self.db.add(
                UserSession(
                    user_id=user.id,
                    token_hash=hash_session_token(label),
                    created_at=now - timedelta(days=31),
                    expires_at=expires_at,
                )
            )
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def test_only_expired_rows_are_deleted(self) -> None:
        self.assertEqual(run_session_cleanup(self.db, _settings()), 2)
        remaining = {row.token_hash for row in self.db.query(UserSession).all()}
        self.assertEqual(remaining, {hash_session_token("live"), hash_session_token("no-expiry")})

    def test_idempotent(self) -> None:
        run_session_cleanup(self.db, _settings())
        self.assertEqual(run_session_cleanup(self.db, _settings()), 0)
        self.assertEqual(self.db.query(UserSession).count(), 2)


class TestCleanupCli(unittest.TestCase):
    """python -m users_api.session_cleanup exit codes and options."""

    @patch.object(cleanup_cli, "run_session_cleanup", return_value=4)
    @patch.object(cleanup_cli, "SessionLocal")
    def test_success(self, session_local: MagicMock, run: MagicMock) -> None:
        self.assertEqual(cleanup_cli.main([]), 0)
        run.assert_called_once()
        session_local.return_value.close.assert_called_once()

    @patch.object(cleanup_cli, "run_session_cleanup", side_effect=RuntimeError("db down"))
    @patch.object(cleanup_cli, "SessionLocal")
    def test_failure_exits_nonzero_and_closes(self, session_local: MagicMock, run: MagicMock) -> None:
        with self.assertLogs("users_api.session_cleanup", level="ERROR"):
            self.assertEqual(cleanup_cli.main([]), 1)
        session_local.return_value.close.assert_called_once()

    @patch.object(cleanup_cli, "run_session_cleanup", return_value=0)
    @patch.object(cleanup_cli, "get_settings")
    @patch.object(cleanup_cli, "SessionLocal")
    def test_force_overrides_disabled_setting(
        self, session_local: MagicMock, get_settings: MagicMock, run: MagicMock
    ) -> None:
        get_settings.return_value = make_settings(SESSION_CLEANUP_ENABLED=False)
        cleanup_cli.main(["--force"])
        self.assertTrue(run.call_args.args[1].SESSION_CLEANUP_ENABLED)

    @patch.object(cleanup_cli, "run_session_cleanup", return_value=0)
    @patch.object(cleanup_cli, "SessionLocal")
    def test_database_url_override(self, session_local: MagicMock, run: MagicMock) -> None:
        self.assertEqual(cleanup_cli.main(["--database-url", "sqlite://"]), 0)
        session_local.assert_not_called()
        run.assert_called_once()


if __name__ == "__main__":
    unittest.main()
