"""User directory: registration, credential checks, and account updates."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from users_api.core.security import hash_password, verify_password
from users_api.models import User
from users_api.models.enums import UserRole, UserStatus, parse_enum
from users_api.schemas.user import UserCreate, UserPatch

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base class for user directory errors surfaced to the API layer."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserConflictError(UserServiceError):
    """A unique field (email or nickname) is already taken."""


class EmailAlreadyExistsError(UserConflictError):
    def __init__(self) -> None:
        super().__init__("Email already registered.")


class NicknameAlreadyExistsError(UserConflictError):
    def __init__(self) -> None:
        super().__init__("Nickname already taken.")


class InvalidCurrentPasswordError(UserServiceError):
    def __init__(self) -> None:
        super().__init__("Current password is incorrect.")


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _nickname_taken(db: Session, nickname: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.nickname == nickname)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _commit_or_conflict(db: Session, email: str, nickname: str, exclude_id: int | None = None) -> None:
    """
    Commit, translating a unique-index violation into the matching conflict error.

    The pre-checks callers run are only a fast path; two concurrent writers can both
    pass them, and the store's unique indexes decide.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("User write hit a unique constraint: %s", type(e.orig).__name__)
        if _email_taken(db, email, exclude_id):
            raise EmailAlreadyExistsError() from e
        if _nickname_taken(db, nickname, exclude_id):
            raise NicknameAlreadyExistsError() from e
        raise UserConflictError("User conflicts with an existing account.") from e


def create_user(
    db: Session,
    data: UserCreate,
    password_hasher: Callable[[str], str] = hash_password,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Create an active, unconfirmed account.

    Raises EmailAlreadyExistsError / NicknameAlreadyExistsError on duplicates.
    """
    email = str(data.email)
    if _email_taken(db, email):
        raise EmailAlreadyExistsError()
    if _nickname_taken(db, data.nickname):
        raise NicknameAlreadyExistsError()

    now = datetime.now(UTC)
    user = User(
        nickname=data.nickname,
        name=data.name,
        lastname=data.lastname,
        email=email,
        password=password_hasher(data.password),
        role=role.value,
        status=UserStatus.ACTIVE.value,
        email_confirmed=False,
        registration_date=now,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    _commit_or_conflict(db, email, data.nickname)
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user when email and password match, else None. Status is not checked here."""
    user = get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.password):
        return None
    return user


def is_login_allowed(user: User) -> bool:
    return parse_enum(UserStatus, user.status) is UserStatus.ACTIVE


def record_login(user: User) -> None:
    """Stamp last_login; committed together with whatever the caller added to the session."""
    user.last_login = datetime.now(UTC)


def update_user(
    db: Session,
    user: User,
    patch: UserPatch,
    password_hasher: Callable[[str], str] = hash_password,
) -> User:
    """
    Apply a partial update. Role and status strings are parsed strictly
    (InvalidEnumValueError on unknown values); email/nickname stay unique.
    """
    if patch.email is not None and str(patch.email) != user.email:
        if _email_taken(db, str(patch.email), exclude_id=user.id):
            raise EmailAlreadyExistsError()
        user.email = str(patch.email)
    if patch.nickname is not None and patch.nickname != user.nickname:
        if _nickname_taken(db, patch.nickname, exclude_id=user.id):
            raise NicknameAlreadyExistsError()
        user.nickname = patch.nickname
    if patch.name is not None:
        user.name = patch.name
    if patch.lastname is not None:
        user.lastname = patch.lastname
    if patch.password is not None:
        user.password = password_hasher(patch.password)
    if patch.role is not None:
        user.role = parse_enum(UserRole, patch.role).value
    if patch.status is not None:
        user.status = parse_enum(UserStatus, patch.status).value
    if patch.email_confirmed is not None:
        user.email_confirmed = patch.email_confirmed
    user.updated_at = datetime.now(UTC)
    _commit_or_conflict(db, user.email, user.nickname, exclude_id=user.id)
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password):
        raise InvalidCurrentPasswordError()
    user.password = hash_password(new_password)
    user.updated_at = datetime.now(UTC)
    db.commit()


def reset_password(db: Session, user: User, new_password: str) -> None:
    user.password = hash_password(new_password)
    user.updated_at = datetime.now(UTC)
    db.commit()


def confirm_email(db: Session, user: User) -> None:
    user.email_confirmed = True
    user.updated_at = datetime.now(UTC)
    db.commit()


def delete_user(db: Session, user: User) -> None:
    """Delete the account; its sessions and preference go with it."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})
