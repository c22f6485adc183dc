"""
Comments module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.profiles.models import Principal

from .models import Comment, CommentThread


@runtime_checkable
class ICommentService(Protocol):
    """
    Interface for threaded comments on posts.
    """

    async def list_comments(self, post_id: str) -> list[Comment]:
        """
        Flat list of a post's comments, newest first, authors joined.

        Read failures are logged and yield an empty list.
        """
        ...

    async def get_thread(self, post_id: str) -> CommentThread:
        """Flat list plus the nested tree built from it."""
        ...

    async def get_comment(self, comment_id: str) -> Optional[Comment]:
        ...

    async def add_comment(
        self,
        post_id: str,
        author: Principal,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        """
        Create a top-level comment or a reply.

        Raises:
            CommentTargetNotFoundError: If the post does not exist
            InvalidParentCommentError: If parent_id is not a comment on the post
            ValidationError: If content is blank
        """
        ...

    async def edit_comment(self, comment_id: str, editor_id: str, content: str) -> Comment:
        """
        Edit a comment's content. Allowed once, by its author.

        Raises:
            CommentNotFoundError, CommentAccessDeniedError, CommentAlreadyEditedError
        """
        ...

    async def delete_comment(self, comment_id: str, actor: Principal) -> list[str]:
        """
        Delete a comment and every transitive reply in one batch.

        Returns:
            Deleted ids, target first
        """
        ...

    async def delete_comments(self, comment_ids: list[str]) -> None:
        """Batch-delete an already collected set of comment ids."""
        ...

    async def delete_comments_for_post(self, post_id: str) -> int:
        """Remove every comment of a post; returns how many were removed."""
        ...

    async def toggle_comment_like(self, comment_id: str, principal_id: str, liked: bool) -> bool:
        """Flip a like given its current state; returns the new state."""
        ...
