"""Core settings, database sessions and auth primitives."""

from app.core.config import Settings, get_settings, settings
from app.core.database import SessionLocal, get_db

__all__ = ["Settings", "SessionLocal", "get_db", "get_settings", "settings"]
