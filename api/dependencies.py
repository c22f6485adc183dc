"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations on top of one shared
Remote Data Gateway.

The gateway backend is chosen by BLOGGAZERS_GATEWAY_BACKEND: "supabase"
for deployments, "memory" for local runs and tests.
"""

import uuid
from typing import TYPE_CHECKING, Optional

from fastapi import Depends, Request, Response

from modules.auth.exceptions import InsufficientPermissionsError
from modules.profiles.exceptions import RegistrationIncompleteError
from shared.config import Settings, get_settings
from shared.models import Identity

from .middleware.auth import get_current_user, get_optional_user

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.admin.service import AdminService
    from modules.auth.interfaces import IAuthService
    from modules.comments.interfaces import ICommentService
    from modules.contact.service import ContactService
    from modules.gateway.interfaces import IDocumentGateway
    from modules.posts.interfaces import IPostService
    from modules.posts.views import ViewMarkerStore
    from modules.profiles.interfaces import IProfileService
    from modules.profiles.models import Principal
    from modules.uploads.service import UploadService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        gateway: "IDocumentGateway | None" = None,
    ) -> None:
        self._settings = settings
        self._gateway_override = gateway
        self._gateway = gateway
        self._auth_service: "IAuthService | None" = None
        self._profile_service: "IProfileService | None" = None
        self._comment_service: "ICommentService | None" = None
        self._post_service: "IPostService | None" = None
        self._upload_service: "UploadService | None" = None
        self._admin_service: "AdminService | None" = None
        self._contact_service: "ContactService | None" = None
        self._view_markers: "ViewMarkerStore | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def gateway(self) -> "IDocumentGateway":
        """Get the Remote Data Gateway selected by settings."""
        if self._gateway is None:
            if self.settings.gateway_backend == "memory":
                from modules.gateway.memory import InMemoryGateway
                self._gateway = InMemoryGateway(bucket=self.settings.supabase_storage_bucket)
            else:
                from modules.gateway.supabase_gateway import SupabaseGateway
                from shared.database import get_supabase_client
                self._gateway = SupabaseGateway(
                    get_supabase_client(),
                    bucket=self.settings.supabase_storage_bucket,
                )
        return self._gateway

    @property
    def auth_service(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(self.settings)
        return self._auth_service

    @property
    def profile_service(self) -> "IProfileService":
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(self.gateway, self.settings)
        return self._profile_service

    @property
    def comment_service(self) -> "ICommentService":
        if self._comment_service is None:
            from modules.comments.service import CommentService
            self._comment_service = CommentService(self.gateway, self.profile_service)
        return self._comment_service

    @property
    def upload_service(self) -> "UploadService":
        if self._upload_service is None:
            from modules.uploads.service import UploadService
            self._upload_service = UploadService(self.gateway, self.settings)
        return self._upload_service

    @property
    def view_markers(self) -> "ViewMarkerStore":
        if self._view_markers is None:
            from modules.posts.views import ViewMarkerStore
            self._view_markers = ViewMarkerStore()
        return self._view_markers

    @property
    def post_service(self) -> "IPostService":
        if self._post_service is None:
            from modules.posts.service import PostService
            self._post_service = PostService(
                self.gateway,
                profiles=self.profile_service,
                comments=self.comment_service,
                uploads=self.upload_service,
                view_markers=self.view_markers,
                settings=self.settings,
            )
        return self._post_service

    @property
    def admin_service(self) -> "AdminService":
        if self._admin_service is None:
            from modules.admin.service import AdminService
            self._admin_service = AdminService(
                self.gateway,
                profiles=self.profile_service,
                posts=self.post_service,
                settings=self.settings,
            )
        return self._admin_service

    @property
    def contact_service(self) -> "ContactService":
        if self._contact_service is None:
            from modules.contact.service import ContactService
            self._contact_service = ContactService(self.gateway)
        return self._contact_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._gateway = self._gateway_override
        self._auth_service = None
        self._profile_service = None
        self._comment_service = None
        self._post_service = None
        self._upload_service = None
        self._admin_service = None
        self._contact_service = None
        self._view_markers = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (tests and local runs)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth_service


def get_profile_service() -> "IProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profile_service


def get_comment_service() -> "ICommentService":
    """FastAPI dependency for comment service."""
    return get_container().comment_service


def get_post_service() -> "IPostService":
    """FastAPI dependency for post service."""
    return get_container().post_service


def get_upload_service() -> "UploadService":
    """FastAPI dependency for upload service."""
    return get_container().upload_service


def get_admin_service() -> "AdminService":
    """FastAPI dependency for admin service."""
    return get_container().admin_service


def get_contact_service() -> "ContactService":
    """FastAPI dependency for contact service."""
    return get_container().contact_service


# -----------------------------------------------------------------------------
# Principal resolution
# -----------------------------------------------------------------------------


async def get_current_principal(
    identity: Identity = Depends(get_current_user),
    profiles: "IProfileService" = Depends(get_profile_service),
) -> "Principal":
    """
    The caller's principal, created in the PENDING state on first contact.
    """
    return await profiles.ensure_principal(identity)


async def get_optional_principal(
    identity: Optional[Identity] = Depends(get_optional_user),
    profiles: "IProfileService" = Depends(get_profile_service),
) -> "Optional[Principal]":
    """The caller's principal if a valid token was sent, else None."""
    if identity is None:
        return None
    return await profiles.ensure_principal(identity)


async def require_active_principal(
    principal: "Principal" = Depends(get_current_principal),
) -> "Principal":
    """Principal that has completed registration."""
    if not principal.is_active:
        raise RegistrationIncompleteError(principal.id)
    return principal


async def require_admin(
    principal: "Principal" = Depends(get_current_principal),
) -> "Principal":
    """
    Principal with the admin role.

    Pending principals are held at registration before the role check.
    """
    if not principal.is_active:
        raise RegistrationIncompleteError(principal.id)
    if not principal.is_admin:
        raise InsufficientPermissionsError("admin", principal.role.value, principal.id)
    return principal


def get_view_session_key(
    request: Request,
    response: Response,
    container: ServiceContainer = Depends(get_container),
) -> str:
    """
    Browsing-session key used to count each post view once.

    Read from the session cookie, or minted and set on the response.
    """
    settings = container.settings
    key = request.cookies.get(settings.view_session_cookie)
    if not key:
        key = uuid.uuid4().hex
        # No max_age: expires with the browser session
        response.set_cookie(
            settings.view_session_cookie,
            key,
            httponly=True,
            samesite="lax",
        )
    return key
