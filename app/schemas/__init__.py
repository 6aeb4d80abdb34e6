"""Pydantic request/response schemas."""

from app.schemas.admin import AdminStatsResponse
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    SessionUser,
    UserListItem,
    UserUpdateRequest,
)
from app.schemas.comments import CommentCreateRequest, CommentResponse
from app.schemas.health import HealthResponse
from app.schemas.posts import LikeResponse, PostResponse, SavedPostResponse
from app.schemas.subscribers import (
    ContactRequest,
    ContactResponse,
    ContactSubmitResponse,
    SubscribeRequest,
    SubscriberResponse,
)

__all__ = [
    "AdminStatsResponse",
    "CommentCreateRequest",
    "CommentResponse",
    "ContactRequest",
    "ContactResponse",
    "ContactSubmitResponse",
    "CurrentUser",
    "HealthResponse",
    "LikeResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PostResponse",
    "RegisterRequest",
    "SavedPostResponse",
    "SessionUser",
    "SubscribeRequest",
    "SubscriberResponse",
    "UserListItem",
    "UserUpdateRequest",
]
