"""Request/response schemas for registration, login and session endpoints."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

Role = Literal["user", "admin"]


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email (unique)")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """Credentials for login. Email is not shape-checked so bad input fails like a wrong password."""

    email: str = Field(..., min_length=1, max_length=320, description="Login email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class SessionUser(BaseModel):
    """Public identity of the logged-in user (GET /check-auth)."""

    email: str
    username: str
    role: Role

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """JWT returned after successful login; the same token is also set as a cookie."""

    status: Literal["Success"] = "Success"
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: SessionUser


class CurrentUser(BaseModel):
    """Claims of a verified session token, injected into handlers by the access guard."""

    id: int
    email: str
    username: str
    role: Role


class UserListItem(BaseModel):
    """User entry for registration and admin listings (no password)."""

    id: int
    username: str
    email: str
    role: Role

    model_config = {"from_attributes": True}


class UserUpdateRequest(BaseModel):
    """Admin edit of a user; omitted fields are left unchanged."""

    username: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: Role | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
