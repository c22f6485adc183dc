"""
Admin panel API endpoints.

Every endpoint requires the admin role; other callers get 403 with their
id and role in the error details.
"""

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_admin_service, require_admin
from modules.posts.models import Post
from modules.profiles.models import Principal

from .models import DashboardStats, PublishRequest
from .service import AdminService

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> DashboardStats:
    """Counts of users, active users, posts and published posts."""
    return await service.dashboard_stats()


@router.get("/users", response_model=list[Principal])
async def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> list[Principal]:
    return await service.list_users(limit)


@router.post("/users/{user_id}/role", response_model=Principal)
async def toggle_user_role(
    user_id: str,
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Principal:
    """Switch a user between the user and admin roles."""
    return await service.toggle_role(user_id)


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Response:
    await service.delete_user(user_id)
    return Response(status_code=204)


@router.get("/posts", response_model=list[Post])
async def list_posts(
    limit: int = Query(default=50, ge=1, le=200),
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> list[Post]:
    """Newest posts first, published or not."""
    return await service.list_posts(limit)


@router.put("/posts/{post_id}/published", response_model=Post)
async def set_post_published(
    post_id: str,
    request: PublishRequest,
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Post:
    return await service.set_published(post_id, request.published)


@router.delete("/posts/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    admin: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Response:
    """Delete a post together with its comments."""
    await service.delete_post(post_id, admin)
    return Response(status_code=204)
