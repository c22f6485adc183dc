"""
Posts module interface.

The API layer, the admin panel and the post reader depend on IPostService.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.profiles.models import Principal
from modules.uploads import UploadResult

from .models import Category, CreatePostRequest, Post, PostPage, TagCount, UpdatePostRequest


@runtime_checkable
class IPostService(Protocol):
    """
    Interface for blog post operations.

    Public reads (listings, search, tags, related) log backend failures and
    degrade to empty results. Writes propagate errors.
    """

    async def create_post(self, author: Principal, request: CreatePostRequest) -> Post:
        """
        Publish a new post authored by an active principal.

        Raises:
            RegistrationIncompleteError: If the author has not finished registration
            InvalidPostTitleError: If the title produces an empty slug
        """
        ...

    async def get_post(self, post_id: str) -> Optional[Post]:
        ...

    async def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """Post with author joined, or None."""
        ...

    async def update_post(self, post_id: str, editor: Principal, request: UpdatePostRequest) -> Post:
        """
        Author-only partial update.

        Raises:
            PostNotFoundError, PostAccessDeniedError
        """
        ...

    async def delete_post(self, post_id: str, actor: Principal) -> int:
        """
        Delete a post and all of its comments. Author or admin only.

        Returns:
            Number of comments removed with it
        """
        ...

    async def list_posts(
        self,
        category: Optional[Category] = None,
        tag: Optional[str] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        include_unpublished: bool = False,
    ) -> PostPage:
        """
        Newest-first listing with cursor pagination.

        Raises:
            ValidationError: If both category and tag are given
        """
        ...

    async def recent_posts(self, limit: int = 3) -> list[Post]:
        ...

    async def related_posts(self, post: Post, limit: Optional[int] = None) -> list[Post]:
        """Same category, different slug, newest first."""
        ...

    async def list_author_posts(self, author_id: str, include_unpublished: bool = False) -> list[Post]:
        ...

    async def get_posts_by_ids(self, post_ids: list[str]) -> list[Post]:
        """Resolve ids (e.g. bookmarks) in batches; missing ids are skipped."""
        ...

    async def search_posts(self, query: str) -> list[Post]:
        ...

    async def tag_counts(self) -> list[TagCount]:
        ...

    async def toggle_like(self, post_id: str, principal_id: str, liked: bool) -> bool:
        """Flip a like given its current state; returns the new state."""
        ...

    async def set_published(self, post_id: str, published: bool) -> Post:
        ...

    def mark_view(self, session_key: str, post_id: str) -> bool:
        """True if this is the session's first view of the post."""
        ...

    async def increment_views(self, post_id: str) -> None:
        """Fire-and-forget view increment; failures are logged only."""
        ...

    async def record_view(self, post_id: str, session_key: str) -> bool:
        """mark_view followed by increment_views when the view counts."""
        ...

    async def upload_cover(self, filename: str, data: bytes, content_type: Optional[str]) -> UploadResult:
        ...
