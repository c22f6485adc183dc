"""
Post API endpoints.

Listing, search, tags, authoring and reactions. Posts are addressed by
slug in URLs.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response

from api.dependencies import (
    get_optional_principal,
    get_post_service,
    get_view_session_key,
    require_active_principal,
)
from modules.profiles.models import Principal

from .exceptions import PostNotFoundError
from .interfaces import IPostService
from .models import (
    Category,
    CreatePostRequest,
    LikeState,
    Post,
    PostPage,
    TagCount,
    UpdatePostRequest,
    ViewResult,
)

router = APIRouter()


async def _visible_post(slug: str, viewer: Optional[Principal], service: IPostService) -> Post:
    """Post by slug; drafts resolve only for their author and admins."""
    post = await service.get_post_by_slug(slug)
    if post is None:
        raise PostNotFoundError(slug)
    if not post.published and not (
        viewer is not None and (viewer.id == post.author_id or viewer.is_admin)
    ):
        raise PostNotFoundError(slug)
    return post


@router.get("", response_model=PostPage)
async def list_posts(
    category: Optional[Category] = Query(default=None, description="Filter by category"),
    tag: Optional[str] = Query(default=None, description="Filter by tag"),
    cursor: Optional[str] = Query(default=None, description="Cursor from the previous page"),
    limit: Optional[int] = Query(default=None, ge=1, le=50, description="Page size"),
    service: IPostService = Depends(get_post_service),
) -> PostPage:
    """
    Published posts, newest first.

    Filter by category or by tag (not both). Pass the returned cursor to
    get the next page.
    """
    return await service.list_posts(category=category, tag=tag, cursor=cursor, limit=limit)


@router.get("/recent", response_model=list[Post])
async def recent_posts(
    limit: int = Query(default=3, ge=1, le=20),
    service: IPostService = Depends(get_post_service),
) -> list[Post]:
    return await service.recent_posts(limit)


@router.get("/search", response_model=list[Post])
async def search_posts(
    q: str = Query(default="", max_length=200, description="Search terms"),
    service: IPostService = Depends(get_post_service),
) -> list[Post]:
    """Case-insensitive search over titles, excerpts and tags."""
    return await service.search_posts(q)


@router.get("/tags", response_model=list[TagCount])
async def list_tags(
    service: IPostService = Depends(get_post_service),
) -> list[TagCount]:
    """Tags in use, most frequent first."""
    return await service.tag_counts()


@router.get("/categories", response_model=list[Category])
async def list_categories() -> list[Category]:
    return list(Category)


@router.post("", response_model=Post, status_code=201)
async def create_post(
    request: CreatePostRequest,
    principal: Principal = Depends(require_active_principal),
    service: IPostService = Depends(get_post_service),
) -> Post:
    return await service.create_post(principal, request)


@router.get("/{slug}", response_model=Post)
async def get_post(
    slug: str,
    viewer: Optional[Principal] = Depends(get_optional_principal),
    service: IPostService = Depends(get_post_service),
) -> Post:
    return await _visible_post(slug, viewer, service)


@router.patch("/{slug}", response_model=Post)
async def update_post(
    slug: str,
    request: UpdatePostRequest,
    principal: Principal = Depends(require_active_principal),
    service: IPostService = Depends(get_post_service),
) -> Post:
    """Author-only edit. Changing the title changes the slug."""
    post = await _visible_post(slug, principal, service)
    return await service.update_post(post.id, principal, request)


@router.delete("/{slug}", status_code=204)
async def delete_post(
    slug: str,
    principal: Principal = Depends(require_active_principal),
    service: IPostService = Depends(get_post_service),
) -> Response:
    """Delete a post and its comments (author or admin)."""
    post = await _visible_post(slug, principal, service)
    await service.delete_post(post.id, principal)
    return Response(status_code=204)


@router.get("/{slug}/related", response_model=list[Post])
async def related_posts(
    slug: str,
    viewer: Optional[Principal] = Depends(get_optional_principal),
    service: IPostService = Depends(get_post_service),
) -> list[Post]:
    post = await _visible_post(slug, viewer, service)
    return await service.related_posts(post)


@router.post("/{slug}/view", response_model=ViewResult)
async def record_view(
    slug: str,
    background_tasks: BackgroundTasks,
    session_key: str = Depends(get_view_session_key),
    service: IPostService = Depends(get_post_service),
) -> ViewResult:
    """
    Count a view once per browsing session.

    The counter update runs after the response is sent.
    """
    post = await service.get_post_by_slug(slug)
    if post is None:
        raise PostNotFoundError(slug)
    counted = service.mark_view(session_key, post.id)
    if counted:
        background_tasks.add_task(service.increment_views, post.id)
    return ViewResult(post_id=post.id, counted=counted)


@router.put("/{slug}/like", response_model=LikeState)
async def like_post(
    slug: str,
    principal: Principal = Depends(require_active_principal),
    service: IPostService = Depends(get_post_service),
) -> LikeState:
    post = await _visible_post(slug, principal, service)
    liked = await service.toggle_like(post.id, principal.id, liked=False)
    return LikeState(post_id=post.id, liked=liked)


@router.delete("/{slug}/like", response_model=LikeState)
async def unlike_post(
    slug: str,
    principal: Principal = Depends(require_active_principal),
    service: IPostService = Depends(get_post_service),
) -> LikeState:
    post = await _visible_post(slug, principal, service)
    liked = await service.toggle_like(post.id, principal.id, liked=True)
    return LikeState(post_id=post.id, liked=liked)
