"""Request/response schemas for user accounts. No schema carries the password hash."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from users_api.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, check_password_bytes
from users_api.schemas.preference import PreferenceRead

EMAIL_MAX_LEN = 60


def _check_email_length(v: str | None) -> str | None:
    if v is not None and len(v) > EMAIL_MAX_LEN:
        raise ValueError(f"email must be at most {EMAIL_MAX_LEN} characters")
    return v


class UserCreate(BaseModel):
    """Fields for a new account (public registration or admin bootstrap)."""

    nickname: str = Field(..., min_length=1, max_length=15)
    name: str = Field(..., min_length=1, max_length=30)
    lastname: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str | None) -> str | None:
        return _check_email_length(v)

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class AdminUserCreate(UserCreate):
    """Account created by an admin, who may pick the role."""

    role: str = "user"


class UserPatch(BaseModel):
    """Partial update; omitted fields are left as they are."""

    nickname: str | None = Field(default=None, min_length=1, max_length=15)
    name: str | None = Field(default=None, min_length=1, max_length=30)
    lastname: str | None = Field(default=None, min_length=1, max_length=30)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    role: str | None = None
    status: str | None = None
    email_confirmed: bool | None = None

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str | None) -> str | None:
        return _check_email_length(v)

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str | None) -> str | None:
        return v if v is None else check_password_bytes(v)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nickname: str
    name: str
    lastname: str
    email: str
    role: str
    status: str
    email_confirmed: bool
    last_login: datetime | None = None
    registration_date: datetime
    created_at: datetime
    updated_at: datetime


class UserWithPreferenceRead(UserRead):
    preference: PreferenceRead | None = None


class UsersListResponse(BaseModel):
    users: list[UserRead]
