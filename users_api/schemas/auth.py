"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from users_api.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, check_password_bytes
from users_api.schemas.preference import PreferenceRead
from users_api.schemas.user import UserCreate, UserRead, UserWithPreferenceRead

TokenType = Literal["jwt", "session"]


class RegisterRequest(UserCreate):
    """Public self-registration. Role and status are always user/active."""


class RegisterResponse(BaseModel):
    user: UserRead
    preference: PreferenceRead | None = None


class LoginRequest(BaseModel):
    """Credentials for login; token_type picks a JWT or a legacy opaque session token."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    token_type: TokenType = "jwt"


class LoginResponse(BaseModel):
    """Issued token. Send it back as: Authorization: Bearer <token>"""

    token: str = Field(..., description="JWT or opaque session token")
    token_type: TokenType
    expires_at: datetime | None = None
    user: UserWithPreferenceRead


class LogoutRequest(BaseModel):
    all_sessions: bool = Field(
        default=False,
        description="Revoke every session of the caller, not just the presented token",
    )


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class MessageResponse(BaseModel):
    message: str
