"""Core app configuration, database, security and error handling."""

from library_api.core.config import get_settings, settings
from library_api.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
