"""
Posts service implementation.

Posts live in the posts collection. Likes are an array of principal ids
updated with ArrayUnion/ArrayRemove and views a counter updated with
Increment, so concurrent readers never overwrite each other.
"""

import logging
import re
from collections import Counter
from typing import Optional

from modules.comments.interfaces import ICommentService
from modules.gateway import (
    POSTS,
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    Filter,
    FilterOp,
    GatewayError,
    IDocumentGateway,
    Increment,
    OrderBy,
    ServerTimestamp,
    encode_cursor,
)
from modules.profiles.exceptions import RegistrationIncompleteError
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import AuthorSummary, Principal
from modules.uploads import UploadFolder, UploadResult, UploadService
from shared.config import Settings, get_settings
from shared.exceptions import ValidationError

from .exceptions import InvalidPostTitleError, PostAccessDeniedError, PostNotFoundError
from .models import Category, CreatePostRequest, Post, PostPage, TagCount, UpdatePostRequest
from .views import ViewMarkerStore

logger = logging.getLogger(__name__)

_SLUG_SEPARATORS = re.compile(r"[\s\W-]+", re.ASCII)

NEWEST_FIRST = [OrderBy("created_at", descending=True)]

# Backend "in" filters accept at most this many values per query
LOOKUP_BATCH_SIZE = 10

# Upper bound for an author's post list
AUTHOR_POSTS_LIMIT = 100


def slugify(title: str) -> str:
    """URL slug: lower-cased, separators collapsed to "-", edges trimmed."""
    return _SLUG_SEPARATORS.sub("-", title.lower().strip()).strip("-")


def matches_search(post: Post, terms: list[str]) -> bool:
    """
    Search predicate over lower-cased terms.

    Matches when every term is in the title, or every term is in the
    excerpt, or any tag contains any term.
    """
    if not terms:
        return False
    title = post.title.lower()
    excerpt = post.excerpt.lower()
    tags = [t.lower() for t in post.tags]
    return (
        all(term in title for term in terms)
        or all(term in excerpt for term in terms)
        or any(term in tag for tag in tags for term in terms)
    )


class PostService:
    """
    Post operations over the document gateway.
    """

    def __init__(
        self,
        gateway: IDocumentGateway,
        profiles: IProfileService,
        comments: ICommentService,
        uploads: UploadService,
        view_markers: Optional[ViewMarkerStore] = None,
        settings: Optional[Settings] = None,
    ):
        self._gateway = gateway
        self._profiles = profiles
        self._comments = comments
        self._uploads = uploads
        self._view_markers = view_markers or ViewMarkerStore()
        self._settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _with_authors(self, posts: list[Post]) -> list[Post]:
        if not posts:
            return posts
        try:
            authors = await self._profiles.get_principals([p.author_id for p in posts])
        except GatewayError as e:
            logger.warning(f"Author join failed for posts: {e}")
            return posts
        return [
            p.model_copy(update={"author": AuthorSummary.from_principal(authors[p.author_id])})
            if p.author_id in authors else p
            for p in posts
        ]

    async def _require(self, post_id: str) -> Post:
        post = await self.get_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create_post(self, author: Principal, request: CreatePostRequest) -> Post:
        if not author.is_active:
            raise RegistrationIncompleteError(author.id)

        slug = slugify(request.title)
        if not slug:
            raise InvalidPostTitleError(request.title)

        post_id = await self._gateway.add_document(POSTS, {
            "author_id": author.id,
            "title": request.title.strip(),
            "slug": slug,
            "content": request.content,
            "excerpt": request.excerpt.strip(),
            "cover_image": request.cover_image,
            "category": request.category.value,
            "tags": request.tags,
            "views": 0,
            "likes": [],
            "published": request.published,
            "created_at": ServerTimestamp(),
            "updated_at": ServerTimestamp(),
        })
        logger.info(f"User {author.id} created post {post_id} ({slug})")
        post = await self._require(post_id)
        return post.model_copy(update={"author": AuthorSummary.from_principal(author)})

    async def get_post(self, post_id: str) -> Optional[Post]:
        document = await self._gateway.get_document(POSTS, post_id)
        return Post(**document) if document is not None else None

    async def get_post_by_slug(self, slug: str) -> Optional[Post]:
        try:
            page = await self._gateway.query_documents(
                POSTS,
                filters=[Filter("slug", FilterOp.EQ, slug)],
                limit=1,
            )
        except GatewayError as e:
            logger.error(f"Failed to load post {slug}: {e}")
            return None
        if not page.documents:
            return None
        posts = await self._with_authors([Post(**page.documents[0])])
        return posts[0]

    async def update_post(self, post_id: str, editor: Principal, request: UpdatePostRequest) -> Post:
        post = await self._require(post_id)
        if post.author_id != editor.id:
            raise PostAccessDeniedError(post_id, editor.id)

        changes = request.model_dump(exclude_unset=True, mode="json")
        if "title" in changes:
            slug = slugify(changes["title"])
            if not slug:
                raise InvalidPostTitleError(changes["title"])
            changes["title"] = changes["title"].strip()
            changes["slug"] = slug
        changes["updated_at"] = ServerTimestamp()

        await self._gateway.update_document(POSTS, post_id, changes)
        updated = await self._require(post_id)
        return updated.model_copy(update={"author": AuthorSummary.from_principal(editor)})

    async def delete_post(self, post_id: str, actor: Principal) -> int:
        post = await self._require(post_id)
        if post.author_id != actor.id and not actor.is_admin:
            raise PostAccessDeniedError(post_id, actor.id)

        await self._gateway.delete_document(POSTS, post_id)
        removed = await self._comments.delete_comments_for_post(post_id)
        logger.info(f"Deleted post {post_id} and {removed} comments")
        return removed

    async def set_published(self, post_id: str, published: bool) -> Post:
        try:
            await self._gateway.update_document(POSTS, post_id, {"published": published})
        except DocumentNotFoundError:
            raise PostNotFoundError(post_id)
        return await self._require(post_id)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    async def list_posts(
        self,
        category: Optional[Category] = None,
        tag: Optional[str] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        include_unpublished: bool = False,
    ) -> PostPage:
        if category is not None and tag:
            raise ValidationError(
                "Filter by category or by tag, not both",
                details={"category": category.value, "tag": tag},
            )
        limit = limit or self._settings.listing_page_size

        filters: list[Filter] = []
        if not include_unpublished:
            filters.append(Filter("published", FilterOp.EQ, True))
        if category is not None:
            filters.append(Filter("category", FilterOp.EQ, category.value))
        if tag:
            filters.append(Filter("tags", FilterOp.ARRAY_CONTAINS, tag.strip()))

        try:
            # One extra row tells us whether another page exists
            page = await self._gateway.query_documents(
                POSTS,
                filters=filters,
                order=NEWEST_FIRST,
                limit=limit + 1,
                cursor=cursor,
            )
        except GatewayError as e:
            logger.error(f"Failed to list posts: {e}")
            return PostPage(posts=[])

        documents = page.documents[:limit]
        has_more = len(page.documents) > limit
        next_cursor = encode_cursor(documents[-1], NEWEST_FIRST) if has_more else None
        posts = await self._with_authors([Post(**d) for d in documents])
        return PostPage(posts=posts, cursor=next_cursor, has_more=has_more)

    async def _scan(self, filters: list[Filter], limit: int, context: str) -> list[Post]:
        try:
            page = await self._gateway.query_documents(
                POSTS,
                filters=filters,
                order=NEWEST_FIRST,
                limit=limit,
            )
        except GatewayError as e:
            logger.error(f"Failed to load {context}: {e}")
            return []
        return [Post(**d) for d in page.documents]

    async def recent_posts(self, limit: int = 3) -> list[Post]:
        posts = await self._scan([Filter("published", FilterOp.EQ, True)], limit, "recent posts")
        return await self._with_authors(posts)

    async def related_posts(self, post: Post, limit: Optional[int] = None) -> list[Post]:
        limit = limit or self._settings.related_posts_limit
        # Fetch one extra in case the post itself is among the newest
        candidates = await self._scan(
            [
                Filter("published", FilterOp.EQ, True),
                Filter("category", FilterOp.EQ, post.category.value),
            ],
            limit + 1,
            "related posts",
        )
        related = [p for p in candidates if p.slug != post.slug][:limit]
        return await self._with_authors(related)

    async def list_author_posts(self, author_id: str, include_unpublished: bool = False) -> list[Post]:
        filters = [Filter("author_id", FilterOp.EQ, author_id)]
        if not include_unpublished:
            filters.append(Filter("published", FilterOp.EQ, True))
        posts = await self._scan(filters, AUTHOR_POSTS_LIMIT, f"posts of {author_id}")
        return await self._with_authors(posts)

    async def get_posts_by_ids(self, post_ids: list[str]) -> list[Post]:
        unique_ids = list(dict.fromkeys(post_ids))
        found: dict[str, Post] = {}
        for start in range(0, len(unique_ids), LOOKUP_BATCH_SIZE):
            batch = unique_ids[start:start + LOOKUP_BATCH_SIZE]
            try:
                page = await self._gateway.query_documents(
                    POSTS,
                    filters=[Filter("id", FilterOp.IN, batch)],
                )
            except GatewayError as e:
                logger.error(f"Failed to resolve post batch: {e}")
                continue
            for document in page.documents:
                found[document["id"]] = Post(**document)
        # Keep the caller's order
        posts = [found[i] for i in unique_ids if i in found]
        return await self._with_authors(posts)

    async def search_posts(self, query: str) -> list[Post]:
        terms = query.lower().split()
        if not terms:
            return []
        candidates = await self._scan(
            [Filter("published", FilterOp.EQ, True)],
            self._settings.search_scan_limit,
            "search candidates",
        )
        return await self._with_authors([p for p in candidates if matches_search(p, terms)])

    async def tag_counts(self) -> list[TagCount]:
        posts = await self._scan(
            [Filter("published", FilterOp.EQ, True)],
            self._settings.tag_scan_limit,
            "tags",
        )
        counts = Counter(tag.strip() for p in posts for tag in p.tags if tag.strip())
        return [TagCount(tag=tag, count=count) for tag, count in counts.most_common()]

    # -------------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------------

    async def toggle_like(self, post_id: str, principal_id: str, liked: bool) -> bool:
        operation = ArrayRemove(principal_id) if liked else ArrayUnion(principal_id)
        try:
            await self._gateway.update_document(POSTS, post_id, {"likes": operation})
        except DocumentNotFoundError:
            raise PostNotFoundError(post_id)
        return not liked

    def mark_view(self, session_key: str, post_id: str) -> bool:
        return self._view_markers.mark_viewed(session_key, post_id)

    async def increment_views(self, post_id: str) -> None:
        try:
            await self._gateway.update_document(POSTS, post_id, {"views": Increment(1)})
        except (GatewayError, DocumentNotFoundError) as e:
            logger.warning(f"View increment failed for post {post_id}: {e}")

    async def record_view(self, post_id: str, session_key: str) -> bool:
        if not self.mark_view(session_key, post_id):
            return False
        await self.increment_views(post_id)
        return True

    async def upload_cover(self, filename: str, data: bytes, content_type: Optional[str]) -> UploadResult:
        return await self._uploads.upload_image(UploadFolder.BLOG_COVERS, filename, data, content_type)
