"""
Authentication service implementation.

Verifies Supabase Auth access tokens and turns their claims into an
Identity. Everything application-specific (status, role, profile) is
looked up on the principal document by the profiles module.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import jwt

from shared.config import Settings, get_settings
from shared.models import Identity

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .interfaces import IAuthService
from .models import JWTPayload

logger = logging.getLogger(__name__)

JWT_ALGORITHMS = ["HS256"]
JWT_AUDIENCE = "authenticated"


def identity_from_payload(payload: JWTPayload) -> Identity:
    metadata = payload.user_metadata
    return Identity(
        id=payload.sub,
        email=payload.email or "",
        display_name=metadata.get("full_name") or metadata.get("name"),
        avatar_url=metadata.get("avatar_url") or metadata.get("picture"),
        email_verified=bool(metadata.get("email_verified", False)),
        last_sign_in=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
    )


class AuthService(IAuthService):
    """
    Validates HS256 tokens signed with the project's JWT secret.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    @property
    def configured(self) -> bool:
        return bool(self._settings.supabase_jwt_secret)

    async def validate_token(self, token: str) -> Identity:
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=JWT_ALGORITHMS,
                audience=JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError(str(e))

        return identity_from_payload(JWTPayload(**payload))


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
