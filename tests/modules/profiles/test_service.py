"""
Tests for ProfileService.
"""

from unittest.mock import AsyncMock

import pytest

from modules.gateway import USERS, GatewayError, InMemoryGateway
from modules.profiles.exceptions import (
    InvalidUsernameError,
    PrincipalNotFoundError,
    RegistrationAlreadyCompletedError,
    UsernameTakenError,
)
from modules.profiles.models import (
    CompleteRegistrationRequest,
    Education,
    PrincipalStatus,
    Role,
    SocialLinks,
    UpdateProfileRequest,
)
from modules.profiles.service import ProfileService, default_principal, validate_username
from shared.config import Settings
from shared.exceptions import ValidationError
from shared.models import Identity
from tests.conftest import make_principal, seed_principal


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def service(gateway, settings):
    return ProfileService(gateway, settings)


def registration(username="new_writer", full_name="New Writer", **extra):
    return CompleteRegistrationRequest(username=username, full_name=full_name, **extra)


class TestValidateUsername:
    @pytest.mark.parametrize("username", ["abc", "Ada_Lovelace", "user_123"])
    def test_valid(self, username):
        assert validate_username(username) is None

    @pytest.mark.parametrize("username", ["ab", "", "has space", "dash-ed", "émile"])
    def test_invalid(self, username):
        assert validate_username(username) is not None


class TestDefaultPrincipal:
    def test_uses_provider_details(self, settings):
        identity = Identity(id="u1", email="u1@example.com", display_name="Ada", avatar_url="https://a")
        principal = default_principal(identity, settings)
        assert principal.full_name == "Ada"
        assert principal.avatar_url == "https://a"
        assert principal.status == PrincipalStatus.PENDING
        assert principal.role == Role.USER

    def test_fallbacks(self, settings):
        principal = default_principal(Identity(id="u1"), settings)
        assert principal.full_name == "New User"
        assert "u1" in principal.avatar_url


class TestEnsurePrincipal:
    @pytest.mark.asyncio
    async def test_creates_once(self, service, gateway):
        identity = Identity(id="u1", email="u1@example.com")
        first = await service.ensure_principal(identity)
        await gateway.update_document(USERS, "u1", {"bio": "kept"})
        second = await service.ensure_principal(identity)

        assert first.status == PrincipalStatus.PENDING
        assert second.bio == "kept"
        assert (await gateway.get_document(USERS, "u1"))["created_at"] is not None


class TestRegistration:
    @pytest.mark.asyncio
    async def test_complete_registration(self, service, gateway):
        await service.ensure_principal(Identity(id="u1"))

        principal = await service.complete_registration("u1", registration(
            username="New_Writer",
            full_name="  New Writer ",
            socials=SocialLinks(github="nw"),
        ))

        assert principal.status == PrincipalStatus.ACTIVE
        assert principal.username == "new_writer"
        assert principal.full_name == "New Writer"
        assert principal.socials.github == "nw"

    @pytest.mark.asyncio
    async def test_cannot_register_twice(self, service, gateway):
        await seed_principal(gateway, make_principal("u1", username="done"))
        with pytest.raises(RegistrationAlreadyCompletedError):
            await service.complete_registration("u1", registration())

    @pytest.mark.asyncio
    async def test_invalid_username(self, service):
        await service.ensure_principal(Identity(id="u1"))
        with pytest.raises(InvalidUsernameError):
            await service.complete_registration("u1", registration(username="no"))

    @pytest.mark.asyncio
    async def test_full_name_required(self, service):
        await service.ensure_principal(Identity(id="u1"))
        with pytest.raises(ValidationError):
            await service.complete_registration("u1", registration(full_name="   "))

    @pytest.mark.asyncio
    async def test_username_taken_case_insensitive(self, service, gateway):
        await seed_principal(gateway, make_principal("other", username="writer"))
        await service.ensure_principal(Identity(id="u1"))
        with pytest.raises(UsernameTakenError):
            await service.complete_registration("u1", registration(username="Writer"))

    @pytest.mark.asyncio
    async def test_unknown_principal(self, service):
        with pytest.raises(PrincipalNotFoundError):
            await service.complete_registration("ghost", registration())


class TestUsernameChecks:
    @pytest.mark.asyncio
    async def test_check_username(self, service, gateway):
        await seed_principal(gateway, make_principal("other", username="taken"))

        assert (await service.check_username("Fresh_One")).available
        taken = await service.check_username("TAKEN")
        assert not taken.available
        assert "taken" in taken.reason
        assert not (await service.check_username("x")).available

    @pytest.mark.asyncio
    async def test_lookup_failure_counts_as_taken(self, settings):
        gateway = AsyncMock()
        gateway.count_documents.side_effect = GatewayError("count_documents", "down")
        assert await ProfileService(gateway, settings).is_username_taken("anyone")

    @pytest.mark.asyncio
    async def test_get_by_username(self, service, gateway):
        await seed_principal(gateway, make_principal("u1", username="ada"))
        assert (await service.get_by_username(" ADA ")).id == "u1"
        assert await service.get_by_username("nobody") is None


class TestUpdates:
    @pytest.mark.asyncio
    async def test_update_profile_writes_only_set_fields(self, service, gateway):
        await seed_principal(gateway, make_principal("u1", username="ada", bio="Old bio"))

        principal = await service.update_profile("u1", UpdateProfileRequest(
            profession="Engineer",
            education=[Education(institution="MIT", degree="BSc")],
        ))

        assert principal.profession == "Engineer"
        assert principal.bio == "Old bio"
        assert principal.education[0].institution == "MIT"
        assert principal.education[0].id

    @pytest.mark.asyncio
    async def test_update_missing_principal(self, service):
        with pytest.raises(PrincipalNotFoundError):
            await service.update_profile("ghost", UpdateProfileRequest(bio="x"))

    @pytest.mark.asyncio
    async def test_toggle_bookmark(self, service, gateway):
        await seed_principal(gateway, make_principal("u1"))

        assert await service.toggle_bookmark("u1", "post-1", bookmarked=False) is True
        assert (await service.get_principal("u1")).bookmarks == ["post-1"]
        assert await service.toggle_bookmark("u1", "post-1", bookmarked=True) is False
        assert (await service.get_principal("u1")).bookmarks == []

    @pytest.mark.asyncio
    async def test_get_principals_batches_lookups(self, service, gateway):
        for i in range(23):
            await seed_principal(gateway, make_principal(f"u{i}", username=f"user{i}"))

        found = await service.get_principals([f"u{i}" for i in range(23)] + ["u1", "ghost"])

        assert len(found) == 23
        assert found["u7"].username == "user7"

    @pytest.mark.asyncio
    async def test_set_role_and_delete(self, service, gateway):
        await seed_principal(gateway, make_principal("u1"))

        assert (await service.set_role("u1", Role.ADMIN)).is_admin
        await service.delete_principal("u1")
        assert await service.get_principal("u1") is None
        with pytest.raises(PrincipalNotFoundError):
            await service.delete_principal("u1")


class TestPublicView:
    def test_hides_private_fields(self):
        principal = make_principal("u1", phone="555-0100", bookmarks=["p1"])
        public = principal.public_view().model_dump()
        assert "phone" not in public
        assert "bookmarks" not in public
        assert "email" not in public
        assert public["username"] == "tester"
