"""
Admin panel service.

Callers are expected to have passed the admin check already; the API
layer enforces it with the require_admin dependency.
"""

import logging
from typing import Optional

from modules.gateway import POSTS, USERS, Filter, FilterOp, IDocumentGateway
from modules.posts.interfaces import IPostService
from modules.posts.models import Post
from modules.profiles.exceptions import PrincipalNotFoundError
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import Principal, PrincipalStatus, Role
from shared.config import Settings, get_settings

from .models import DashboardStats

logger = logging.getLogger(__name__)


class AdminService:
    """Moderation operations over users and posts."""

    def __init__(
        self,
        gateway: IDocumentGateway,
        profiles: IProfileService,
        posts: IPostService,
        settings: Optional[Settings] = None,
    ):
        self._gateway = gateway
        self._profiles = profiles
        self._posts = posts
        self._settings = settings or get_settings()

    async def dashboard_stats(self) -> DashboardStats:
        active = [Filter("status", FilterOp.EQ, PrincipalStatus.ACTIVE.value)]
        published = [Filter("published", FilterOp.EQ, True)]
        return DashboardStats(
            total_users=await self._gateway.count_documents(USERS),
            active_users=await self._gateway.count_documents(USERS, active),
            total_posts=await self._gateway.count_documents(POSTS),
            published_posts=await self._gateway.count_documents(POSTS, published),
        )

    async def list_users(self, limit: Optional[int] = None) -> list[Principal]:
        return await self._profiles.list_principals(limit or self._settings.admin_list_limit)

    async def toggle_role(self, user_id: str) -> Principal:
        """Flip a user between the user and admin roles."""
        principal = await self._profiles.get_principal(user_id)
        if principal is None:
            raise PrincipalNotFoundError(user_id)
        new_role = Role.USER if principal.is_admin else Role.ADMIN
        return await self._profiles.set_role(user_id, new_role)

    async def delete_user(self, user_id: str) -> None:
        await self._profiles.delete_principal(user_id)

    async def list_posts(self, limit: Optional[int] = None) -> list[Post]:
        page = await self._posts.list_posts(
            limit=limit or self._settings.admin_list_limit,
            include_unpublished=True,
        )
        return page.posts

    async def set_published(self, post_id: str, published: bool) -> Post:
        post = await self._posts.set_published(post_id, published)
        logger.info(f"Post {post_id} published={published}")
        return post

    async def delete_post(self, post_id: str, admin: Principal) -> int:
        return await self._posts.delete_post(post_id, admin)
