"""
Profile API endpoints.

The caller's own profile, the finish-registration flow, bookmarks and
public author pages.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import (
    get_current_principal,
    get_optional_principal,
    get_post_service,
    get_profile_service,
    require_active_principal,
)
from modules.posts.interfaces import IPostService
from modules.posts.models import Post

from .interfaces import IProfileService
from .models import (
    BookmarkState,
    CompleteRegistrationRequest,
    Principal,
    PublicProfile,
    UpdateProfileRequest,
    UsernameAvailability,
)

router = APIRouter()


@router.get("/me", response_model=Principal)
async def get_my_profile(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """The caller's full profile, created as pending on first sign-in."""
    return principal


@router.patch("/me", response_model=Principal)
async def update_my_profile(
    request: UpdateProfileRequest,
    principal: Principal = Depends(require_active_principal),
    service: IProfileService = Depends(get_profile_service),
) -> Principal:
    """
    Partial update of the caller's profile, including résumé sections.

    New résumé entries without an id get one generated.
    """
    return await service.update_profile(principal.id, request)


@router.post("/me/finish", response_model=Principal)
async def finish_registration(
    request: CompleteRegistrationRequest,
    principal: Principal = Depends(get_current_principal),
    service: IProfileService = Depends(get_profile_service),
) -> Principal:
    """
    Complete the one-time registration: choose a username and fill in the
    basics. The principal becomes active.
    """
    return await service.complete_registration(principal.id, request)


@router.get("/check-username", response_model=UsernameAvailability)
async def check_username(
    username: str = Query(..., min_length=1, max_length=64),
    service: IProfileService = Depends(get_profile_service),
) -> UsernameAvailability:
    """Format check plus best-effort availability check."""
    return await service.check_username(username)


@router.get("/me/bookmarks", response_model=list[Post])
async def list_my_bookmarks(
    principal: Principal = Depends(require_active_principal),
    posts: IPostService = Depends(get_post_service),
) -> list[Post]:
    return await posts.get_posts_by_ids(principal.bookmarks)


@router.put("/me/bookmarks/{post_id}", response_model=BookmarkState)
async def add_bookmark(
    post_id: str,
    principal: Principal = Depends(require_active_principal),
    service: IProfileService = Depends(get_profile_service),
) -> BookmarkState:
    bookmarked = await service.toggle_bookmark(principal.id, post_id, bookmarked=False)
    return BookmarkState(post_id=post_id, bookmarked=bookmarked)


@router.delete("/me/bookmarks/{post_id}", response_model=BookmarkState)
async def remove_bookmark(
    post_id: str,
    principal: Principal = Depends(require_active_principal),
    service: IProfileService = Depends(get_profile_service),
) -> BookmarkState:
    bookmarked = await service.toggle_bookmark(principal.id, post_id, bookmarked=True)
    return BookmarkState(post_id=post_id, bookmarked=bookmarked)


@router.get("/by-username/{username}", response_model=PublicProfile)
async def get_profile_by_username(
    username: str,
    service: IProfileService = Depends(get_profile_service),
) -> PublicProfile:
    principal = await service.get_by_username(username)
    if principal is None:
        raise HTTPException(status_code=404, detail="User not found")
    return principal.public_view()


@router.get("/{user_id}", response_model=PublicProfile)
async def get_public_profile(
    user_id: str,
    service: IProfileService = Depends(get_profile_service),
) -> PublicProfile:
    """Author page profile; private fields are omitted."""
    principal = await service.get_principal(user_id)
    if principal is None:
        raise HTTPException(status_code=404, detail="User not found")
    return principal.public_view()


@router.get("/{user_id}/posts", response_model=list[Post])
async def list_author_posts(
    user_id: str,
    viewer: Optional[Principal] = Depends(get_optional_principal),
    posts: IPostService = Depends(get_post_service),
) -> list[Post]:
    """An author's posts, newest first. Authors also see their drafts."""
    include_unpublished = viewer is not None and viewer.id == user_id
    return await posts.list_author_posts(user_id, include_unpublished=include_unpublished)
