"""ORM model for issued bearer tokens (stored as hashes only)."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import relationship

from users_api.models.base import Base


class UserSession(Base):
    """
    One issued token. token_hash is the SHA-256 hex of the bearer token;
    the raw token is never stored. expires_at NULL means no server-side expiry.
    """

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="sessions")

    __table_args__ = (Index("ux_sessions_token_hash", "token_hash", unique=True),)
