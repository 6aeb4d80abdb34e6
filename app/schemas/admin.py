"""Response schemas for the admin dashboard."""

from pydantic import BaseModel, Field


class AdminStatsResponse(BaseModel):
    """Row counts shown on the dashboard."""

    users: int = Field(..., ge=0)
    posts: int = Field(..., ge=0)
    contacts: int = Field(..., ge=0)
    subscribers: int = Field(..., ge=0)
