"""
Post reader: local state for one open post.

Holds the post, its flat comment list and the reader's bookmark state.
Every reaction is applied locally first and confirmed against the backend
through OptimisticUpdater; a rejected write restores the exact previous
local state.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from modules.comments.interfaces import ICommentService
from modules.comments.models import Comment, CommentNode
from modules.comments.tree import build_comment_tree, collect_descendant_ids
from modules.posts.exceptions import PostNotFoundError
from modules.posts.interfaces import IPostService
from modules.posts.models import Post
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import Principal
from shared.optimistic import OptimisticUpdater

from .exceptions import NotSignedInError, ReaderNotOpenError

logger = logging.getLogger(__name__)

POST_LIKE = "post_like"
BOOKMARK = "bookmark"
COMMENT_LIKE = "comment_like"
COMMENT_EDIT = "comment_edit"
COMMENT_DELETE = "comment_delete"


class ReadingView(BaseModel):
    """Everything a post page renders."""

    post: Post
    comments: list[Comment]
    tree: list[CommentNode]
    liked: bool
    bookmarked: bool
    view_counted: bool


class PostReader:
    """
    Per-page controller for reading one post.

    Usage:
        reader = PostReader(posts, comments, profiles, principal, session_key=key)
        await reader.open("my-first-post")
        await reader.toggle_like()
    """

    def __init__(
        self,
        posts: IPostService,
        comments: ICommentService,
        profiles: IProfileService,
        principal: Optional[Principal] = None,
        session_key: Optional[str] = None,
        updater: Optional[OptimisticUpdater] = None,
    ):
        self._posts = posts
        self._comments_service = comments
        self._profiles = profiles
        self._principal = principal
        self._session_key = session_key
        self._updater = updater or OptimisticUpdater()

        self._post: Optional[Post] = None
        self._comments: list[Comment] = []
        self._bookmarked = False
        self._view_counted = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def post(self) -> Post:
        if self._post is None:
            raise ReaderNotOpenError()
        return self._post

    @property
    def comments(self) -> list[Comment]:
        return list(self._comments)

    @property
    def tree(self) -> list[CommentNode]:
        return build_comment_tree(self._comments)

    @property
    def liked(self) -> bool:
        return self._principal is not None and self.post.is_liked_by(self._principal.id)

    @property
    def bookmarked(self) -> bool:
        return self._bookmarked

    @property
    def updater(self) -> OptimisticUpdater:
        return self._updater

    def view(self) -> ReadingView:
        return ReadingView(
            post=self.post,
            comments=self.comments,
            tree=self.tree,
            liked=self.liked,
            bookmarked=self._bookmarked,
            view_counted=self._view_counted,
        )

    def _can_see(self, post: Post) -> bool:
        """Unpublished posts are visible to their author and admins only."""
        if post.published:
            return True
        principal = self._principal
        return principal is not None and (principal.id == post.author_id or principal.is_admin)

    def _require_principal(self, action: str) -> Principal:
        if self._principal is None:
            raise NotSignedInError(action)
        return self._principal

    def _comment_index(self, comment_id: str) -> int:
        for index, comment in enumerate(self._comments):
            if comment.id == comment_id:
                return index
        raise KeyError(comment_id)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def open(self, slug: str) -> ReadingView:
        """
        Load the post and its comments, counting the view once per session.

        Raises:
            PostNotFoundError: If no post has this slug
        """
        post = await self._posts.get_post_by_slug(slug)
        if post is None or not self._can_see(post):
            raise PostNotFoundError(slug)
        self._post = post
        self._comments = await self._comments_service.list_comments(post.id)
        self._bookmarked = (
            self._principal is not None and post.id in self._principal.bookmarks
        )

        if self._session_key and self._posts.mark_view(self._session_key, post.id):
            self._view_counted = True
            self._post = post.model_copy(update={"views": post.views + 1})
            await self._posts.increment_views(post.id)
        return self.view()

    # -------------------------------------------------------------------------
    # Post reactions
    # -------------------------------------------------------------------------

    async def toggle_like(self) -> bool:
        principal = self._require_principal("like posts")
        post = self.post
        liked = post.is_liked_by(principal.id)
        previous = list(post.likes)

        def apply() -> None:
            likes = [i for i in previous if i != principal.id] if liked else previous + [principal.id]
            self._post = self.post.model_copy(update={"likes": likes})

        def revert() -> None:
            self._post = self.post.model_copy(update={"likes": previous})

        return await self._updater.run(
            POST_LIKE, post.id,
            apply=apply,
            commit=lambda: self._posts.toggle_like(post.id, principal.id, liked),
            revert=revert,
        )

    async def toggle_bookmark(self) -> bool:
        principal = self._require_principal("bookmark posts")
        post = self.post
        bookmarked = self._bookmarked

        def apply() -> None:
            self._bookmarked = not bookmarked

        def revert() -> None:
            self._bookmarked = bookmarked

        return await self._updater.run(
            BOOKMARK, post.id,
            apply=apply,
            commit=lambda: self._profiles.toggle_bookmark(principal.id, post.id, bookmarked),
            revert=revert,
        )

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    async def add_comment(self, content: str, parent_id: Optional[str] = None) -> Comment:
        """Confirm-then-insert: the comment appears once the backend accepted it."""
        principal = self._require_principal("comment")
        comment = await self._comments_service.add_comment(self.post.id, principal, content, parent_id)
        self._comments.insert(0, comment)
        return comment

    def _replace_comment(self, comment_id: str, comment: Comment) -> None:
        try:
            self._comments[self._comment_index(comment_id)] = comment
        except KeyError:
            logger.debug(f"Comment {comment_id} no longer in local state")

    async def toggle_comment_like(self, comment_id: str) -> bool:
        principal = self._require_principal("like comments")
        original = self._comments[self._comment_index(comment_id)]
        liked = principal.id in original.likes

        def apply() -> None:
            likes = (
                [i for i in original.likes if i != principal.id]
                if liked else original.likes + [principal.id]
            )
            self._replace_comment(comment_id, original.model_copy(update={"likes": likes}))

        def revert() -> None:
            self._replace_comment(comment_id, original)

        return await self._updater.run(
            COMMENT_LIKE, comment_id,
            apply=apply,
            commit=lambda: self._comments_service.toggle_comment_like(comment_id, principal.id, liked),
            revert=revert,
        )

    async def edit_comment(self, comment_id: str, content: str) -> Comment:
        principal = self._require_principal("edit comments")
        original = self._comments[self._comment_index(comment_id)]

        def apply() -> None:
            self._replace_comment(comment_id, original.model_copy(update={
                "content": content.strip(),
                "edited_at": datetime.now(timezone.utc),
            }))

        def revert() -> None:
            self._replace_comment(comment_id, original)

        saved = await self._updater.run(
            COMMENT_EDIT, comment_id,
            apply=apply,
            commit=lambda: self._comments_service.edit_comment(comment_id, principal.id, content),
            revert=revert,
        )
        saved = saved.model_copy(update={"author": original.author})
        self._replace_comment(comment_id, saved)
        return saved

    async def delete_comment(self, comment_id: str) -> list[str]:
        """Remove a comment and its replies locally, then on the backend."""
        principal = self._require_principal("delete comments")
        self._comment_index(comment_id)
        doomed = set(collect_descendant_ids(self._comments, comment_id))
        removed: list[tuple[int, Comment]] = []

        def apply() -> None:
            removed.clear()
            kept: list[Comment] = []
            for index, comment in enumerate(self._comments):
                if comment.id in doomed:
                    removed.append((index, comment))
                else:
                    kept.append(comment)
            self._comments = kept

        def revert() -> None:
            for index, comment in removed:
                self._comments.insert(min(index, len(self._comments)), comment)

        return await self._updater.run(
            COMMENT_DELETE, comment_id,
            apply=apply,
            commit=lambda: self._comments_service.delete_comment(comment_id, principal),
            revert=revert,
        )
