"""
Comments service implementation.

Comments are stored flat in the comments collection with a parent_id
pointer; nesting is reconstructed on read by build_comment_tree.
"""

import logging
from typing import Optional

from modules.gateway import (
    COMMENTS,
    POSTS,
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    Filter,
    GatewayError,
    IDocumentGateway,
    OrderBy,
    ServerTimestamp,
)
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import AuthorSummary, Principal
from shared.exceptions import ValidationError

from .exceptions import (
    CommentAccessDeniedError,
    CommentAlreadyEditedError,
    CommentNotFoundError,
    CommentTargetNotFoundError,
    InvalidParentCommentError,
)
from .models import Comment, CommentThread
from .tree import build_comment_tree, collect_descendant_ids

logger = logging.getLogger(__name__)


class CommentService:
    """
    Comment operations over the document gateway.
    """

    def __init__(self, gateway: IDocumentGateway, profiles: IProfileService):
        self._gateway = gateway
        self._profiles = profiles

    async def _fetch_post_comments(self, post_id: str) -> list[Comment]:
        page = await self._gateway.query_documents(
            COMMENTS,
            filters=[Filter("post_id", value=post_id)],
            order=[OrderBy("created_at", descending=True)],
        )
        return [Comment(**d) for d in page.documents]

    async def _with_authors(self, comments: list[Comment]) -> list[Comment]:
        if not comments:
            return comments
        try:
            authors = await self._profiles.get_principals([c.author_id for c in comments])
        except GatewayError as e:
            logger.warning(f"Author join failed for comments: {e}")
            return comments
        return [
            c.model_copy(update={"author": AuthorSummary.from_principal(authors[c.author_id])})
            if c.author_id in authors else c
            for c in comments
        ]

    async def list_comments(self, post_id: str) -> list[Comment]:
        try:
            comments = await self._fetch_post_comments(post_id)
        except GatewayError as e:
            logger.error(f"Failed to load comments for post {post_id}: {e}")
            return []
        return await self._with_authors(comments)

    async def get_thread(self, post_id: str) -> CommentThread:
        comments = await self.list_comments(post_id)
        return CommentThread(
            post_id=post_id,
            total=len(comments),
            comments=comments,
            tree=build_comment_tree(comments),
        )

    async def get_comment(self, comment_id: str) -> Optional[Comment]:
        document = await self._gateway.get_document(COMMENTS, comment_id)
        return Comment(**document) if document is not None else None

    async def _require(self, comment_id: str) -> Comment:
        comment = await self.get_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError(comment_id)
        return comment

    async def add_comment(
        self,
        post_id: str,
        author: Principal,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        content = content.strip()
        if not content:
            raise ValidationError("Comment cannot be empty", details={"field": "content"})

        if await self._gateway.get_document(POSTS, post_id) is None:
            raise CommentTargetNotFoundError(post_id)

        if parent_id is not None:
            parent = await self.get_comment(parent_id)
            if parent is None or parent.post_id != post_id:
                raise InvalidParentCommentError(parent_id, post_id)

        comment_id = await self._gateway.add_document(COMMENTS, {
            "post_id": post_id,
            "author_id": author.id,
            "content": content,
            "parent_id": parent_id,
            "likes": [],
            "created_at": ServerTimestamp(),
            "edited_at": None,
        })
        comment = await self._require(comment_id)
        return comment.model_copy(update={"author": AuthorSummary.from_principal(author)})

    async def edit_comment(self, comment_id: str, editor_id: str, content: str) -> Comment:
        comment = await self._require(comment_id)
        if comment.author_id != editor_id:
            raise CommentAccessDeniedError(comment_id, editor_id)
        if comment.is_edited:
            raise CommentAlreadyEditedError(comment_id)

        content = content.strip()
        if not content:
            raise ValidationError("Comment cannot be empty", details={"field": "content"})

        await self._gateway.update_document(COMMENTS, comment_id, {
            "content": content,
            "edited_at": ServerTimestamp(),
        })
        return await self._require(comment_id)

    async def delete_comment(self, comment_id: str, actor: Principal) -> list[str]:
        comment = await self._require(comment_id)
        if comment.author_id != actor.id and not actor.is_admin:
            raise CommentAccessDeniedError(comment_id, actor.id)

        siblings = await self._fetch_post_comments(comment.post_id)
        ids = collect_descendant_ids(siblings, comment_id)
        await self.delete_comments(ids)
        logger.info(f"Deleted comment {comment_id} with {len(ids) - 1} replies")
        return ids

    async def delete_comments(self, comment_ids: list[str]) -> None:
        await self._gateway.batch_delete(COMMENTS, comment_ids)

    async def delete_comments_for_post(self, post_id: str) -> int:
        comments = await self._fetch_post_comments(post_id)
        await self.delete_comments([c.id for c in comments])
        return len(comments)

    async def toggle_comment_like(self, comment_id: str, principal_id: str, liked: bool) -> bool:
        operation = ArrayRemove(principal_id) if liked else ArrayUnion(principal_id)
        try:
            await self._gateway.update_document(COMMENTS, comment_id, {"likes": operation})
        except DocumentNotFoundError:
            raise CommentNotFoundError(comment_id)
        return not liked
