"""Core app configuration, database, and security primitives."""

from users_api.core.config import get_settings, settings
from users_api.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
