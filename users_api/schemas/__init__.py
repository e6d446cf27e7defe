"""Pydantic request/response schemas."""

from users_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from users_api.schemas.health import HealthResponse
from users_api.schemas.identity import ANONYMOUS, IdentityContext
from users_api.schemas.preference import PreferenceCreate, PreferenceFields, PreferenceRead
from users_api.schemas.session import SessionRead
from users_api.schemas.user import UserCreate, UserPatch, UserRead, UserWithPreferenceRead

__all__ = [
    "ANONYMOUS",
    "HealthResponse",
    "IdentityContext",
    "LoginRequest",
    "LoginResponse",
    "PreferenceCreate",
    "PreferenceFields",
    "PreferenceRead",
    "RegisterRequest",
    "RegisterResponse",
    "SessionRead",
    "UserCreate",
    "UserPatch",
    "UserRead",
    "UserWithPreferenceRead",
]
