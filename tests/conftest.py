"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import patch

import jwt  # PyJWT
import pytest
from fastapi.testclient import TestClient

from api.dependencies import ServiceContainer, reset_container, set_container
from modules.auth.service import reset_auth_service
from modules.gateway import USERS, InMemoryGateway
from modules.profiles.models import Principal, PrincipalStatus, Role
from shared.config import Settings
from shared.models import Identity


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    full_name: Optional[str] = None,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        full_name: Optional display name placed in user_metadata

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_header(user_id: str = "test-user-123", email: str = "test@example.com") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(user_id=user_id, email=email)}"}


def make_principal(
    user_id: str = "test-user-123",
    username: str = "tester",
    status: PrincipalStatus = PrincipalStatus.ACTIVE,
    role: Role = Role.USER,
    **extra,
) -> Principal:
    """Build a principal with sensible defaults."""
    return Principal(
        id=user_id,
        email=f"{user_id}@example.com",
        full_name=extra.pop("full_name", "Test User"),
        username=username if status == PrincipalStatus.ACTIVE else "",
        status=status,
        role=role,
        **extra,
    )


async def seed_principal(gateway: InMemoryGateway, principal: Principal) -> Principal:
    await gateway.set_document(
        USERS,
        principal.id,
        {**principal.to_document(), "created_at": datetime.now(timezone.utc)},
    )
    return principal


@pytest.fixture(autouse=True)
def reset_auth_singleton():
    """Reset the auth service singleton before and after each test."""
    reset_auth_service()
    yield
    reset_auth_service()


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory backend with a known JWT secret."""
    return Settings(
        _env_file=None,
        gateway_backend="memory",
        supabase_jwt_secret=TEST_JWT_SECRET,
    )


@pytest.fixture
def identity() -> Identity:
    return Identity(id="test-user-123", email="test@example.com", display_name="Test User")


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def container(test_settings: Settings, gateway: InMemoryGateway):
    """Install a container backed by the in-memory gateway."""
    container = ServiceContainer(settings=test_settings, gateway=gateway)
    set_container(container)
    yield container
    reset_container()


@pytest.fixture
def client(container: ServiceContainer, test_settings: Settings):
    """
    Test client for a fresh app wired to the in-memory container.

    Token validation reads the test secret.
    """
    from api.app import create_app

    with patch("modules.auth.service.get_settings", return_value=test_settings):
        with TestClient(create_app()) as test_client:
            yield test_client
