"""Unit tests for the user directory: mocked store sessions, plus SQLite for unique-index races."""

import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from users_api.core.database import build_engine
from users_api.models import Base, User
from users_api.models.enums import InvalidEnumValueError, UserRole
from users_api.schemas.user import UserCreate, UserPatch
from users_api.services import users as user_service


def _new_user() -> UserCreate:
    return UserCreate(
        nickname="frank",
        name="Frank",
        lastname="Ocean",
        email="frank@example.com",
        password="s3cret!",
    )


def _unique_violation() -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception("UNIQUE constraint failed"))


class TestCreateUser(unittest.TestCase):
    """create_user pre-checks and unique-index fallback, with a mocked session."""

    def setUp(self) -> None:
        self.db = MagicMock()
        self.first = self.db.query.return_value.filter.return_value.first

    def test_creates_with_hashed_password_and_user_role(self) -> None:
        self.first.return_value = None
        user = user_service.create_user(self.db, _new_user(), password_hasher=lambda p: f"hashed:{p}")
        self.db.add.assert_called_once_with(user)
        self.db.commit.assert_called_once()
        self.assertEqual(user.password, "hashed:s3cret!")
        self.assertEqual(user.role, "user")
        self.assertEqual(user.status, "active")
        self.assertFalse(user.email_confirmed)

    def test_role_can_be_chosen(self) -> None:
        self.first.return_value = None
        user = user_service.create_user(self.db, _new_user(), lambda p: p, role=UserRole.ADMIN)
        self.assertEqual(user.role, "admin")

    def test_precheck_conflicts(self) -> None:
        self.first.side_effect = [(1,)]
        with self.assertRaises(user_service.EmailAlreadyExistsError):
            user_service.create_user(self.db, _new_user(), lambda p: p)
        self.first.side_effect = [None, (1,)]
        with self.assertRaises(user_service.NicknameAlreadyExistsError):
            user_service.create_user(self.db, _new_user(), lambda p: p)
        self.db.add.assert_not_called()

    def test_unique_index_race_maps_to_email_conflict(self) -> None:
        # Both pre-checks pass, then a concurrent insert wins the unique index.
        self.first.side_effect = [None, None, (1,)]
        self.db.commit.side_effect = _unique_violation()
        with self.assertRaises(user_service.EmailAlreadyExistsError):
            user_service.create_user(self.db, _new_user(), lambda p: p)
        self.db.rollback.assert_called_once()

    def test_unique_index_race_maps_to_nickname_conflict(self) -> None:
        self.first.side_effect = [None, None, None, (1,)]
        self.db.commit.side_effect = _unique_violation()
        with self.assertRaises(user_service.NicknameAlreadyExistsError):
            user_service.create_user(self.db, _new_user(), lambda p: p)

    def test_unidentified_violation_is_generic_conflict(self) -> None:
        self.first.side_effect = [None, None, None, None]
        self.db.commit.side_effect = _unique_violation()
        with self.assertRaises(user_service.UserConflictError) as ctx:
            user_service.create_user(self.db, _new_user(), lambda p: p)
        self.assertIs(type(ctx.exception), user_service.UserConflictError)


class TestUniqueIndexRaceOnRealStore(unittest.TestCase):
    """A duplicate that slips past the pre-checks is caught by SQLite's unique index."""

    def setUp(self) -> None:
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
        user_service.create_user(self.db, _new_user(), lambda p: f"hashed:{p}")

    def tearDown(self) -> None:
        self.db.close()

    def test_duplicate_email_after_passing_prechecks(self) -> None:
        duplicate = _new_user().model_copy(update={"nickname": "frankie"})
        # First answer is the pre-check losing the race; second is the lookup after rollback.
        with (
            patch.object(user_service, "_email_taken", side_effect=[False, True]) as email_taken,
            patch.object(user_service, "_nickname_taken", return_value=False),
        ):
            with self.assertRaises(user_service.EmailAlreadyExistsError) as ctx:
                user_service.create_user(self.db, duplicate, lambda p: f"hashed:{p}")
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)
        self.assertEqual(email_taken.call_count, 2)
        # The session was rolled back and is still usable.
        self.assertEqual(self.db.query(User).count(), 1)
        self.assertEqual(self.db.query(User).one().nickname, "frank")

    def test_duplicate_nickname_after_passing_prechecks(self) -> None:
        duplicate = _new_user().model_copy(update={"email": "frank2@example.com"})
        with (
            patch.object(user_service, "_email_taken", return_value=False),
            patch.object(user_service, "_nickname_taken", side_effect=[False, True]),
        ):
            with self.assertRaises(user_service.NicknameAlreadyExistsError):
                user_service.create_user(self.db, duplicate, lambda p: f"hashed:{p}")
        self.assertEqual(self.db.query(User).count(), 1)


class TestUpdateUser(unittest.TestCase):
    """update_user enum handling."""

    def setUp(self) -> None:
        self.db = MagicMock()
        self.user = MagicMock(id=3, email="g@example.com", nickname="g", role="user", status="active")

    def test_invalid_role_raises_before_commit(self) -> None:
        with self.assertRaises(InvalidEnumValueError):
            user_service.update_user(self.db, self.user, UserPatch(role="owner"))
        self.db.commit.assert_not_called()

    def test_role_and_status_normalized(self) -> None:
        user_service.update_user(self.db, self.user, UserPatch(role="ADMIN", status="Blocked"))
        self.assertEqual(self.user.role, "admin")
        self.assertEqual(self.user.status, "blocked")
        self.db.commit.assert_called_once()


class TestAuthenticate(unittest.TestCase):
    """authenticate checks the password only; status is checked separately."""

    def test_status_not_checked_by_authenticate(self) -> None:
        db = MagicMock()
        hashed = user_service.hash_password("s3cret!")
        blocked = MagicMock(password=hashed, status="blocked")
        db.query.return_value.filter.return_value.first.return_value = blocked
        self.assertIs(user_service.authenticate(db, "x@example.com", "s3cret!"), blocked)
        self.assertFalse(user_service.is_login_allowed(blocked))
        self.assertIsNone(user_service.authenticate(db, "x@example.com", "wrong"))

    def test_unknown_email(self) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        self.assertIsNone(user_service.authenticate(db, "x@example.com", "s3cret!"))


if __name__ == "__main__":
    unittest.main()
