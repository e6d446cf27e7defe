"""ORM model for per-user accessibility preferences (at most one row per user)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from users_api.models.base import Base
from users_api.models.enums import AiResponseLevel, Language, ReportFormat, VisualTheme


class Preference(Base):
    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    wcag_version = Column(String(3), nullable=False)
    wcag_level = Column(String(3), nullable=False)
    language = Column(String(2), nullable=False, default=Language.ES.value)
    visual_theme = Column(String(5), nullable=False, default=VisualTheme.LIGHT.value)
    report_format = Column(String(5), nullable=False, default=ReportFormat.PDF.value)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    ai_response_level = Column(
        String(12), nullable=False, default=AiResponseLevel.INTERMEDIATE.value
    )
    font_size = Column(Integer, nullable=False, default=14)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="preference")
