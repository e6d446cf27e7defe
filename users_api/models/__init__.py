"""SQLAlchemy ORM models."""

from users_api.models.base import Base
from users_api.models.preference import Preference
from users_api.models.session import UserSession
from users_api.models.user import User

__all__ = ["Base", "Preference", "User", "UserSession"]
