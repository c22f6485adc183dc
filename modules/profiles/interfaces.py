"""
Profiles module interface.

Other modules (posts, comments, admin, session) depend on IProfileService
for principal lookups and author joins.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import Identity

from .models import (
    CompleteRegistrationRequest,
    Principal,
    Role,
    UpdateProfileRequest,
    UsernameAvailability,
)


@runtime_checkable
class IProfileService(Protocol):
    """
    Interface for principal (user profile) operations.
    """

    async def get_principal(self, principal_id: str) -> Optional[Principal]:
        """
        Get a principal by identity id.

        Returns:
            The principal, or None if no profile document exists yet

        Raises:
            GatewayError: If the backend read fails
        """
        ...

    async def ensure_principal(self, identity: Identity) -> Principal:
        """
        Load the principal for an identity, creating the default PENDING
        profile document when none exists.
        """
        ...

    async def get_by_username(self, username: str) -> Optional[Principal]:
        """Find a principal by handle (case-insensitive). Read failures yield None."""
        ...

    async def get_principals(self, principal_ids: list[str]) -> dict[str, Principal]:
        """Batch lookup used for author joins. Missing ids are omitted."""
        ...

    async def check_username(self, username: str) -> UsernameAvailability:
        """Validate format and run the best-effort uniqueness pre-check."""
        ...

    async def complete_registration(
        self,
        principal_id: str,
        request: CompleteRegistrationRequest,
    ) -> Principal:
        """
        Finish the one-time registration flow.

        Raises:
            PrincipalNotFoundError: If the profile document is missing
            RegistrationAlreadyCompletedError: If the principal is already ACTIVE
            InvalidUsernameError: If the username fails the format rules
            UsernameTakenError: If the pre-check finds the username in use
        """
        ...

    async def update_profile(
        self,
        principal_id: str,
        request: UpdateProfileRequest,
    ) -> Principal:
        """Write the fields set on the request and return the fresh record."""
        ...

    async def toggle_bookmark(self, principal_id: str, post_id: str, bookmarked: bool) -> bool:
        """
        Flip a bookmark given its current state.

        Returns:
            The new bookmarked state
        """
        ...

    async def list_principals(self, limit: int) -> list[Principal]:
        """Most recently created principals first."""
        ...

    async def set_role(self, principal_id: str, role: Role) -> Principal:
        """Change a principal's role."""
        ...

    async def delete_principal(self, principal_id: str) -> None:
        """Remove a principal's profile document."""
        ...
