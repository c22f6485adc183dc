"""
JWT Authentication middleware.

Validates Supabase access tokens from the Authorization header and
resolves them into identities through the auth module.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.auth.service import get_auth_service
from shared.exceptions import AuthenticationError
from shared.models import Identity

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def decode_token(token: str) -> Identity:
    """
    Validate a token and return its identity.

    Raises:
        AuthError: If the token is invalid, expired or the server has no secret
    """
    service = get_auth_service()
    if not service.configured:
        raise AuthError("Server authentication not configured")
    try:
        return await service.validate_token(token)
    except AuthenticationError as e:
        raise AuthError(e.message)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(identity: Identity = Depends(get_current_user)):
            return {"user_id": identity.id}
    """
    if credentials is None:
        raise AuthError("Missing authorization header")
    return await decode_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """
    Dependency that optionally extracts the identity if authenticated.

    Invalid tokens are treated as anonymous.
    """
    if credentials is None:
        return None
    try:
        return await decode_token(credentials.credentials)
    except AuthError as e:
        logger.debug(f"Ignoring invalid optional token: {e.detail}")
        return None

