"""
Profiles module.

Principal records, the one-time registration flow, profile edits,
bookmarks and role changes.

Public API:
- IProfileService: Interface for principal operations
- ProfileService: Gateway-backed implementation
- Principal / PublicProfile / AuthorSummary: Profile views
"""

from .interfaces import IProfileService
from .service import ProfileService, default_principal, validate_username
from .models import (
    PrincipalStatus,
    Role,
    SocialLinks,
    Education,
    Experience,
    Certification,
    Skill,
    SkillLevel,
    Principal,
    PublicProfile,
    AuthorSummary,
    CompleteRegistrationRequest,
    UpdateProfileRequest,
    UsernameAvailability,
    BookmarkState,
    generate_entry_id,
)
from .exceptions import (
    PrincipalNotFoundError,
    InvalidUsernameError,
    UsernameTakenError,
    RegistrationAlreadyCompletedError,
    RegistrationIncompleteError,
)

__all__ = [
    # Interface
    "IProfileService",
    "ProfileService",
    "default_principal",
    "validate_username",
    # Models
    "PrincipalStatus",
    "Role",
    "SocialLinks",
    "Education",
    "Experience",
    "Certification",
    "Skill",
    "SkillLevel",
    "Principal",
    "PublicProfile",
    "AuthorSummary",
    "CompleteRegistrationRequest",
    "UpdateProfileRequest",
    "UsernameAvailability",
    "BookmarkState",
    "generate_entry_id",
    # Exceptions
    "PrincipalNotFoundError",
    "InvalidUsernameError",
    "UsernameTakenError",
    "RegistrationAlreadyCompletedError",
    "RegistrationIncompleteError",
]
