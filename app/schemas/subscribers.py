"""Request/response schemas for newsletter subscription and the contact form."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class SubscribeRequest(BaseModel):
    email: EmailStr


class SubscriberResponse(BaseModel):
    id: int
    email: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ContactRequest(BaseModel):
    """Message submitted through the public contact form."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(..., min_length=1, max_length=10000)


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    message: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ContactSubmitResponse(BaseModel):
    """Envelope returned after a contact message is stored."""

    success: bool = True
    message: str
    data: ContactResponse
