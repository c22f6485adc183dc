"""
Posts module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field, field_validator

from modules.profiles.models import AuthorSummary
from shared.models import PartialUpdate


class Category(str, Enum):
    """Fixed post categories."""

    TECHNOLOGY = "Technology"
    DESIGN = "Design"
    LIFESTYLE = "Lifestyle"
    PERSONAL = "Personal"
    GENERAL = "General"


def parse_tags(raw: Union[str, list[str], None]) -> list[str]:
    """
    Normalize tag input: comma-separated text or a list.

    Tags are trimmed and empty entries dropped; order is preserved.
    """
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [t.strip() for t in items if t and t.strip()]


class Post(BaseModel):
    """A blog post as stored, optionally joined with its author."""

    id: str
    author_id: str
    title: str
    slug: str
    content: str = Field(default="", description="Markdown body")
    excerpt: str = ""
    cover_image: str = ""
    category: Category = Category.GENERAL
    tags: list[str] = Field(default_factory=list)
    views: int = 0
    likes: list[str] = Field(default_factory=list, description="Principal IDs that liked it")
    published: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[AuthorSummary] = None

    model_config = {"extra": "ignore"}

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def is_liked_by(self, principal_id: str) -> bool:
        return principal_id in self.likes


class CreatePostRequest(BaseModel):
    """Request to publish a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    excerpt: str = Field(default="", max_length=500)
    cover_image: str = ""
    category: Category = Category.GENERAL
    tags: list[str] = Field(default_factory=list, description="List or comma-separated string")
    published: bool = True

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        return parse_tags(value)


class UpdatePostRequest(PartialUpdate):
    """Partial post update; a new title also re-derives the slug."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    cover_image: Optional[str] = None
    category: Optional[Category] = None
    tags: Optional[list[str]] = None
    published: Optional[bool] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        return parse_tags(value)


class PostPage(BaseModel):
    """One page of a post listing."""

    posts: list[Post]
    cursor: Optional[str] = Field(None, description="Pass back to fetch the next page")
    has_more: bool = False


class TagCount(BaseModel):
    tag: str
    count: int


class LikeState(BaseModel):
    post_id: str
    liked: bool


class ViewResult(BaseModel):
    post_id: str
    counted: bool = Field(..., description="False when this session already viewed the post")
