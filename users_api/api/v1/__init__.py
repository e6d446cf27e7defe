"""API v1 routes."""

from fastapi import APIRouter

from users_api.api.v1 import auth, preferences, sessions, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
