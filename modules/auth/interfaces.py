"""
Authentication module interface.

The API layer depends on IAuthService to turn bearer tokens into
identities.
"""

from typing import Protocol, runtime_checkable

from shared.models import Identity


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for access token validation.
    """

    async def validate_token(self, token: str) -> Identity:
        """
        Validate an access token and return the identity it was issued to.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            Identity built from the token claims

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token has expired
            InvalidTokenError: If signature, audience or format is wrong
        """
        ...
