"""
Reading API endpoint.

One call that loads everything a post page renders and counts the view.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import (
    ServiceContainer,
    get_container,
    get_optional_principal,
    get_view_session_key,
)
from modules.profiles.models import Principal

from .reader import PostReader, ReadingView

router = APIRouter()


@router.get("/{slug}", response_model=ReadingView)
async def open_post(
    slug: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    session_key: str = Depends(get_view_session_key),
    container: ServiceContainer = Depends(get_container),
) -> ReadingView:
    """
    Open a post: post with author, comments flat and nested, the caller's
    like and bookmark state. The view is counted once per browsing session.
    """
    reader = PostReader(
        container.post_service,
        container.comment_service,
        container.profile_service,
        principal=principal,
        session_key=session_key,
    )
    return await reader.open(slug)
