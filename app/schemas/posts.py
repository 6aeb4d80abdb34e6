"""Response schemas for posts, likes and bookmarks."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostResponse(BaseModel):
    """A post as returned to clients. file is the stored attachment name (served under UPLOAD_URL_PATH)."""

    id: int
    title: str
    description: str
    file: str | None = None
    email: str = Field(..., description="Owner email")
    owner_id: int
    likes: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LikeResponse(BaseModel):
    """Like counter after an increment."""

    id: int
    likes: int = Field(..., ge=0)


class SavedPostResponse(BaseModel):
    """A bookmark with the post it points at."""

    post_id: int
    saved_at: datetime | None = None
    post: PostResponse
