"""Request/response schemas for accessibility preferences."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from users_api.schemas.identity import MAX_USER_ID


class PreferenceFields(BaseModel):
    """
    Preference values as sent by clients. Enum-valued fields stay strings here and are
    parsed strictly by the service, so an unknown value is a 422 rather than a silent default.
    """

    wcag_version: str | None = None
    wcag_level: str | None = None
    language: str | None = None
    visual_theme: str | None = None
    report_format: str | None = None
    notifications_enabled: bool | None = None
    ai_response_level: str | None = None
    font_size: int | None = Field(default=None, ge=8, le=72)


class PreferenceCreate(PreferenceFields):
    user_id: int = Field(..., gt=0, le=MAX_USER_ID)
    wcag_version: str
    wcag_level: str


class PreferenceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    wcag_version: str
    wcag_level: str
    language: str
    visual_theme: str
    report_format: str
    notifications_enabled: bool
    ai_response_level: str
    font_size: int
    created_at: datetime
    updated_at: datetime
