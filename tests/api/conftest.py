"""Fixtures for API route tests: principals seeded into the in-memory gateway."""

import asyncio

import pytest

from modules.profiles.models import PrincipalStatus, Role
from tests.conftest import make_principal, seed_principal


@pytest.fixture
def seed(container):
    """Synchronous seeding helper; TestClient tests run outside an event loop."""

    def _seed(principal):
        return asyncio.run(seed_principal(container.gateway, principal))

    return _seed


@pytest.fixture
def active_user(seed):
    return seed(make_principal())


@pytest.fixture
def admin_user(seed):
    return seed(make_principal(user_id="admin-1", username="boss", role=Role.ADMIN))


@pytest.fixture
def pending_user(seed):
    return seed(make_principal(user_id="pending-1", status=PrincipalStatus.PENDING))
