"""Response schemas for sessions. The token hash is deliberately not exposed."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    expires_at: datetime | None = None


class SessionsListResponse(BaseModel):
    sessions: list[SessionRead]


class SessionExtendRequest(BaseModel):
    """Push a session's expiry forward by the given number of minutes from now."""

    minutes: int = Field(..., ge=1, le=43200)


class SessionsDeletedResponse(BaseModel):
    deleted: int
