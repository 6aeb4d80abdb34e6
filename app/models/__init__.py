"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.comment import Comment
from app.models.contact import Contact
from app.models.post import Post
from app.models.saved_post import SavedPost
from app.models.subscriber import Subscriber
from app.models.user import User

__all__ = ["Base", "Comment", "Contact", "Post", "SavedPost", "Subscriber", "User"]
