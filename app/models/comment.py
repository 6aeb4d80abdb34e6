"""ORM model for post comments."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.models.base import Base


class Comment(Base):
    """
    Append-only comment on a post.

    post_id is not a database foreign key: deleting a post leaves its comments
    in place. author is a snapshot of the commenter's username at write time.
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, nullable=False, index=True)
    author = Column(String(255), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
