"""
Admin module data models.
"""

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """Headline counts for the admin dashboard."""

    total_users: int = Field(..., ge=0)
    active_users: int = Field(..., ge=0, description="Users who completed registration")
    total_posts: int = Field(..., ge=0)
    published_posts: int = Field(..., ge=0)


class PublishRequest(BaseModel):
    published: bool
