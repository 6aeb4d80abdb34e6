"""Request/response schemas for post comments."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CommentCreateRequest(BaseModel):
    """New comment. postId matches the field name the web client sends."""

    postId: int = Field(..., ge=1, description="Post being commented on")
    text: str = Field(..., min_length=1, max_length=5000)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must be non-empty")
        return v.strip()


class CommentResponse(BaseModel):
    id: int
    post_id: int
    author: str
    text: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
