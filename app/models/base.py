"""SQLAlchemy declarative Base shared by every blog table."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for users, posts, comments, subscribers, contacts and bookmarks."""
