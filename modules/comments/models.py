"""
Comments module data models.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from modules.profiles.models import AuthorSummary


class Comment(BaseModel):
    """A comment as stored, optionally joined with its author."""

    id: str
    post_id: str
    author_id: str
    content: str
    parent_id: Optional[str] = Field(None, description="Parent comment ID, None for top level")
    likes: list[str] = Field(default_factory=list, description="Principal IDs that liked it")
    created_at: Optional[datetime] = None
    edited_at: Optional[datetime] = Field(None, description="Set once, on the single allowed edit")
    author: Optional[AuthorSummary] = None

    model_config = {"extra": "ignore"}

    @property
    def is_edited(self) -> bool:
        return self.edited_at is not None

    @property
    def like_count(self) -> int:
        return len(self.likes)


class CommentNode(Comment):
    """A comment with its nested replies."""

    children: list["CommentNode"] = Field(default_factory=list)


class CommentThread(BaseModel):
    """All comments of a post, flat and as a forest."""

    post_id: str
    total: int
    comments: list[Comment]
    tree: list[CommentNode]


class CreateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: Optional[str] = None


class EditCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentLikeState(BaseModel):
    comment_id: str
    liked: bool


class CommentDeleteResult(BaseModel):
    """IDs removed by a delete: the target first, then its descendants."""

    deleted_ids: list[str]
