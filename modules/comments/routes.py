"""
Comment API endpoints.

Threads are addressed by post id; single comments by comment id.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_comment_service, require_active_principal
from modules.profiles.models import Principal

from .interfaces import ICommentService
from .models import (
    Comment,
    CommentDeleteResult,
    CommentLikeState,
    CommentThread,
    CreateCommentRequest,
    EditCommentRequest,
)

router = APIRouter()


@router.get("/posts/{post_id}", response_model=CommentThread)
async def get_thread(
    post_id: str,
    service: ICommentService = Depends(get_comment_service),
) -> CommentThread:
    """All comments of a post, newest first, flat and nested."""
    return await service.get_thread(post_id)


@router.post("/posts/{post_id}", response_model=Comment, status_code=201)
async def add_comment(
    post_id: str,
    request: CreateCommentRequest,
    principal: Principal = Depends(require_active_principal),
    service: ICommentService = Depends(get_comment_service),
) -> Comment:
    """Comment on a post, or reply when parent_id is given."""
    return await service.add_comment(post_id, principal, request.content, request.parent_id)


@router.patch("/{comment_id}", response_model=Comment)
async def edit_comment(
    comment_id: str,
    request: EditCommentRequest,
    principal: Principal = Depends(require_active_principal),
    service: ICommentService = Depends(get_comment_service),
) -> Comment:
    """Edit your own comment. Each comment can be edited once."""
    return await service.edit_comment(comment_id, principal.id, request.content)


@router.delete("/{comment_id}", response_model=CommentDeleteResult)
async def delete_comment(
    comment_id: str,
    principal: Principal = Depends(require_active_principal),
    service: ICommentService = Depends(get_comment_service),
) -> CommentDeleteResult:
    """Delete a comment together with all replies beneath it."""
    deleted = await service.delete_comment(comment_id, principal)
    return CommentDeleteResult(deleted_ids=deleted)


@router.put("/{comment_id}/like", response_model=CommentLikeState)
async def like_comment(
    comment_id: str,
    principal: Principal = Depends(require_active_principal),
    service: ICommentService = Depends(get_comment_service),
) -> CommentLikeState:
    liked = await service.toggle_comment_like(comment_id, principal.id, liked=False)
    return CommentLikeState(comment_id=comment_id, liked=liked)


@router.delete("/{comment_id}/like", response_model=CommentLikeState)
async def unlike_comment(
    comment_id: str,
    principal: Principal = Depends(require_active_principal),
    service: ICommentService = Depends(get_comment_service),
) -> CommentLikeState:
    liked = await service.toggle_comment_like(comment_id, principal.id, liked=True)
    return CommentLikeState(comment_id=comment_id, liked=liked)
