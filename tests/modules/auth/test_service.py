from datetime import datetime, timedelta, timezone

import jwt
import pytest

from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from modules.auth.service import AuthService, get_auth_service, reset_auth_service
from shared.config import Settings


def encode(secret="test-secret", audience="authenticated", expires_in=timedelta(hours=1), **claims):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "user-123",
        "email": "test@example.com",
        "exp": now + expires_in,
        "iat": now,
        "aud": audience,
        "role": "authenticated",
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class TestAuthService:
    @pytest.fixture
    def service(self):
        """Create auth service with a known secret."""
        return AuthService(Settings(_env_file=None, supabase_jwt_secret="test-secret"))

    @pytest.mark.asyncio
    async def test_validate_valid_token(self, service):
        """Should validate a valid token and return the identity."""
        identity = await service.validate_token(encode(user_metadata={"full_name": "Test"}))
        assert identity.id == "user-123"
        assert identity.email == "test@example.com"
        assert identity.display_name == "Test"

    @pytest.mark.asyncio
    async def test_validate_expired_token(self, service):
        """Should raise ExpiredTokenError for expired token."""
        with pytest.raises(ExpiredTokenError):
            await service.validate_token(encode(expires_in=timedelta(hours=-1)))

    @pytest.mark.asyncio
    async def test_validate_invalid_token(self, service):
        """Should raise InvalidTokenError for malformed token."""
        with pytest.raises(InvalidTokenError):
            await service.validate_token("not-a-valid-token")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", None])
    async def test_validate_missing_token(self, service, token):
        """Should raise MissingTokenError for empty token."""
        with pytest.raises(MissingTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    async def test_validate_wrong_secret(self, service):
        """Should raise InvalidTokenError for token signed with wrong secret."""
        with pytest.raises(InvalidTokenError):
            await service.validate_token(encode(secret="wrong-secret"))

    @pytest.mark.asyncio
    async def test_validate_wrong_audience(self, service):
        """Should raise InvalidTokenError for token with wrong audience."""
        with pytest.raises(InvalidTokenError):
            await service.validate_token(encode(audience="wrong-audience"))

    def test_configured(self, service):
        assert service.configured
        assert not AuthService(Settings(_env_file=None, supabase_jwt_secret="")).configured


class TestAuthServiceSingleton:
    def test_get_auth_service_returns_singleton(self):
        """get_auth_service should return the same instance."""
        reset_auth_service()
        assert get_auth_service() is get_auth_service()

    def test_reset_auth_service(self):
        """reset_auth_service should clear the singleton."""
        first = get_auth_service()
        reset_auth_service()
        assert get_auth_service() is not first
