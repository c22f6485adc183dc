"""
Profiles service implementation.

Principals live in the users collection, keyed by the identity provider's
user id. Username uniqueness is a best-effort pre-check (query then
write), so two concurrent registrations can still claim the same handle.
"""

import logging
import re
from typing import Optional

from modules.gateway import (
    USERS,
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    Filter,
    FilterOp,
    GatewayError,
    IDocumentGateway,
    OrderBy,
    ServerTimestamp,
)
from shared.config import Settings, get_settings
from shared.exceptions import ValidationError
from shared.models import Identity

from .exceptions import (
    InvalidUsernameError,
    PrincipalNotFoundError,
    RegistrationAlreadyCompletedError,
    UsernameTakenError,
)
from .models import (
    CompleteRegistrationRequest,
    Principal,
    PrincipalStatus,
    Role,
    UpdateProfileRequest,
    UsernameAvailability,
)

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
USERNAME_MIN_LENGTH = 3

# Backend "in" filters accept at most this many values per query
LOOKUP_BATCH_SIZE = 10


def validate_username(username: str) -> Optional[str]:
    """Return the reason a username is rejected, or None if the format is valid."""
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters long."
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters, numbers, and underscores."
    return None


def default_principal(identity: Identity, settings: Settings) -> Principal:
    """The profile created for an identity signing in for the first time."""
    return Principal(
        id=identity.id,
        email=identity.email,
        full_name=identity.display_name or "New User",
        avatar_url=identity.avatar_url or settings.default_avatar_url.format(user_id=identity.id),
        status=PrincipalStatus.PENDING,
        role=Role.USER,
    )


class ProfileService:
    """
    Principal operations over the document gateway.
    """

    def __init__(self, gateway: IDocumentGateway, settings: Optional[Settings] = None):
        self._gateway = gateway
        self._settings = settings or get_settings()

    async def get_principal(self, principal_id: str) -> Optional[Principal]:
        document = await self._gateway.get_document(USERS, principal_id)
        if document is None:
            return None
        return Principal(**document)

    async def _require(self, principal_id: str) -> Principal:
        principal = await self.get_principal(principal_id)
        if principal is None:
            raise PrincipalNotFoundError(principal_id)
        return principal

    async def ensure_principal(self, identity: Identity) -> Principal:
        existing = await self.get_principal(identity.id)
        if existing is not None:
            return existing

        principal = default_principal(identity, self._settings)
        document = principal.to_document()
        document["created_at"] = ServerTimestamp()
        await self._gateway.set_document(USERS, identity.id, document)
        logger.info(f"Created pending profile for user {identity.id}")
        return principal

    async def get_by_username(self, username: str) -> Optional[Principal]:
        try:
            page = await self._gateway.query_documents(
                USERS,
                filters=[Filter("username", FilterOp.EQ, username.strip().lower())],
                limit=1,
            )
        except GatewayError as e:
            logger.warning(f"Username lookup failed for {username}: {e}")
            return None
        if not page.documents:
            return None
        return Principal(**page.documents[0])

    async def get_principals(self, principal_ids: list[str]) -> dict[str, Principal]:
        unique_ids = list(dict.fromkeys(i for i in principal_ids if i))
        principals: dict[str, Principal] = {}
        for start in range(0, len(unique_ids), LOOKUP_BATCH_SIZE):
            batch = unique_ids[start:start + LOOKUP_BATCH_SIZE]
            page = await self._gateway.query_documents(
                USERS,
                filters=[Filter("id", FilterOp.IN, batch)],
            )
            for document in page.documents:
                principal = Principal(**document)
                principals[principal.id] = principal
        return principals

    async def is_username_taken(self, username: str) -> bool:
        """
        Best-effort uniqueness pre-check.

        A failed lookup is reported as taken so a backend outage cannot be
        used to slip a duplicate handle through.
        """
        try:
            count = await self._gateway.count_documents(
                USERS,
                filters=[Filter("username", FilterOp.EQ, username.lower())],
            )
        except GatewayError as e:
            logger.error(f"Username availability check failed: {e}")
            return True
        return count > 0

    async def check_username(self, username: str) -> UsernameAvailability:
        username = username.strip()
        reason = validate_username(username)
        if reason:
            return UsernameAvailability(username=username, available=False, reason=reason)
        if await self.is_username_taken(username):
            return UsernameAvailability(
                username=username,
                available=False,
                reason="This username is already taken.",
            )
        return UsernameAvailability(username=username.lower(), available=True)

    async def complete_registration(
        self,
        principal_id: str,
        request: CompleteRegistrationRequest,
    ) -> Principal:
        principal = await self._require(principal_id)
        if principal.is_active:
            raise RegistrationAlreadyCompletedError(principal_id)

        username = request.username.strip()
        reason = validate_username(username)
        if reason:
            raise InvalidUsernameError(username, reason)

        full_name = request.full_name.strip()
        if not full_name:
            raise ValidationError("Full name is required", details={"field": "full_name"})

        if await self.is_username_taken(username):
            raise UsernameTakenError(username)

        await self._gateway.update_document(USERS, principal_id, {
            "username": username.lower(),
            "full_name": full_name,
            "phone": request.phone.strip(),
            "profession": request.profession.strip(),
            "socials": request.socials.model_dump(),
            "status": PrincipalStatus.ACTIVE.value,
            "updated_at": ServerTimestamp(),
        })
        logger.info(f"User {principal_id} completed registration as @{username.lower()}")
        return await self._require(principal_id)

    async def update_profile(
        self,
        principal_id: str,
        request: UpdateProfileRequest,
    ) -> Principal:
        changes = request.model_dump(exclude_unset=True, mode="json")
        if not changes:
            return await self._require(principal_id)

        changes["updated_at"] = ServerTimestamp()
        try:
            await self._gateway.update_document(USERS, principal_id, changes)
        except DocumentNotFoundError:
            raise PrincipalNotFoundError(principal_id)
        return await self._require(principal_id)

    async def toggle_bookmark(self, principal_id: str, post_id: str, bookmarked: bool) -> bool:
        operation = ArrayRemove(post_id) if bookmarked else ArrayUnion(post_id)
        try:
            await self._gateway.update_document(USERS, principal_id, {"bookmarks": operation})
        except DocumentNotFoundError:
            raise PrincipalNotFoundError(principal_id)
        return not bookmarked

    async def list_principals(self, limit: int) -> list[Principal]:
        page = await self._gateway.query_documents(
            USERS,
            order=[OrderBy("created_at", descending=True)],
            limit=limit,
        )
        return [Principal(**d) for d in page.documents]

    async def set_role(self, principal_id: str, role: Role) -> Principal:
        try:
            await self._gateway.update_document(USERS, principal_id, {"role": role.value})
        except DocumentNotFoundError:
            raise PrincipalNotFoundError(principal_id)
        logger.info(f"User {principal_id} role set to {role.value}")
        return await self._require(principal_id)

    async def delete_principal(self, principal_id: str) -> None:
        await self._require(principal_id)
        await self._gateway.delete_document(USERS, principal_id)
        logger.info(f"Deleted profile {principal_id}")
