"""
Authentication module.

Verifies access tokens issued by the identity provider.

Public API:
- IAuthService: Interface for token validation
- AuthService / get_auth_service: PyJWT implementation and its singleton
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import JWTPayload
from .service import AuthService, get_auth_service, reset_auth_service, identity_from_payload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InsufficientPermissionsError,
)

__all__ = [
    # Interface
    "IAuthService",
    "AuthService",
    "get_auth_service",
    "reset_auth_service",
    "identity_from_payload",
    # Models
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InsufficientPermissionsError",
]
