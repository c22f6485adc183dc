"""
Posts module.

Authoring, listing, search, tags, likes and per-session view counting for
blog posts.

Public API:
- IPostService: Interface for post operations
- PostService: Gateway-backed implementation
- slugify / parse_tags / matches_search: Pure helpers
- ViewMarkerStore: Per-session view tracking
"""

from .interfaces import IPostService
from .service import PostService, slugify, matches_search
from .views import ViewMarkerStore
from .models import (
    Category,
    Post,
    PostPage,
    CreatePostRequest,
    UpdatePostRequest,
    TagCount,
    LikeState,
    ViewResult,
    parse_tags,
)
from .exceptions import PostNotFoundError, PostAccessDeniedError, InvalidPostTitleError

__all__ = [
    # Interface
    "IPostService",
    "PostService",
    "slugify",
    "matches_search",
    "parse_tags",
    "ViewMarkerStore",
    # Models
    "Category",
    "Post",
    "PostPage",
    "CreatePostRequest",
    "UpdatePostRequest",
    "TagCount",
    "LikeState",
    "ViewResult",
    # Exceptions
    "PostNotFoundError",
    "PostAccessDeniedError",
    "InvalidPostTitleError",
]
