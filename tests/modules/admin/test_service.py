"""Tests for AdminService."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.admin.service import AdminService
from modules.comments.service import CommentService
from modules.gateway import POSTS, InMemoryGateway
from modules.posts.service import PostService
from modules.profiles.exceptions import PrincipalNotFoundError
from modules.profiles.models import PrincipalStatus, Role
from modules.profiles.service import ProfileService
from modules.uploads import UploadService
from shared.config import Settings
from tests.conftest import make_principal, seed_principal


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def service(gateway):
    settings = Settings(_env_file=None, admin_list_limit=50)
    profiles = ProfileService(gateway, settings)
    comments = CommentService(gateway, profiles)
    posts = PostService(gateway, profiles, comments, UploadService(gateway, settings), settings=settings)
    return AdminService(gateway, profiles=profiles, posts=posts, settings=settings)


@pytest.fixture
async def admin(gateway):
    return await seed_principal(gateway, make_principal("admin", username="boss", role=Role.ADMIN))


async def seed_posts(gateway):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, published in enumerate([True, True, False]):
        await gateway.set_document(POSTS, f"p{i}", {
            "author_id": "writer",
            "title": f"Post {i}",
            "slug": f"post-{i}",
            "published": published,
            "created_at": start + timedelta(days=i),
        })


class TestDashboard:
    @pytest.mark.asyncio
    async def test_stats(self, service, gateway, admin):
        await seed_principal(gateway, make_principal("pending", status=PrincipalStatus.PENDING))
        await seed_posts(gateway)

        stats = await service.dashboard_stats()

        assert stats.total_users == 2
        assert stats.active_users == 1
        assert stats.total_posts == 3
        assert stats.published_posts == 2


class TestUsers:
    @pytest.mark.asyncio
    async def test_list_users(self, service, gateway, admin):
        await seed_principal(gateway, make_principal("u1", username="one"))
        users = await service.list_users()
        assert {u.id for u in users} == {"admin", "u1"}

    @pytest.mark.asyncio
    async def test_toggle_role_flips(self, service, gateway):
        await seed_principal(gateway, make_principal("u1"))
        assert (await service.toggle_role("u1")).role == Role.ADMIN
        assert (await service.toggle_role("u1")).role == Role.USER

    @pytest.mark.asyncio
    async def test_toggle_role_unknown_user(self, service):
        with pytest.raises(PrincipalNotFoundError):
            await service.toggle_role("ghost")

    @pytest.mark.asyncio
    async def test_delete_user(self, service, gateway):
        await seed_principal(gateway, make_principal("u1"))
        await service.delete_user("u1")
        assert await gateway.get_document("users", "u1") is None


class TestPosts:
    @pytest.mark.asyncio
    async def test_lists_drafts_too(self, service, gateway):
        await seed_posts(gateway)
        assert [p.id for p in await service.list_posts()] == ["p2", "p1", "p0"]

    @pytest.mark.asyncio
    async def test_publish_and_delete(self, service, gateway, admin):
        await seed_posts(gateway)

        assert (await service.set_published("p2", True)).published
        await service.delete_post("p0", admin)

        assert await gateway.get_document(POSTS, "p0") is None
