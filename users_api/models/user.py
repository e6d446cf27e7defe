"""ORM model for user accounts (identity, credentials, role and status)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from users_api.models.base import Base
from users_api.models.enums import UserRole, UserStatus


class User(Base):
    """
    User account. Owns its sessions and its (optional) preference row.

    role: 'admin' or 'user'; status: 'active', 'inactive' or 'blocked'.
    password holds the bcrypt hash and is never serialized to clients.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nickname = Column(String(15), nullable=False, unique=True, index=True)
    name = Column(String(30), nullable=False)
    lastname = Column(String(30), nullable=False)
    email = Column(String(60), nullable=False, unique=True, index=True)
    password = Column(String(60), nullable=False)
    role = Column(String(5), nullable=False, default=UserRole.USER.value)
    status = Column(String(8), nullable=False, default=UserStatus.ACTIVE.value)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    registration_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    preference = relationship(
        "Preference",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.lastname}".strip()
