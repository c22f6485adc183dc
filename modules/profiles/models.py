"""
Profiles module data models.

A principal is an authenticated user's application-level profile record.
It is created on first sign-in in the PENDING state and becomes ACTIVE
once the one-time registration flow assigns a unique username.
"""

import uuid
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from shared.models import PartialUpdate


def generate_entry_id() -> str:
    """Short random id for résumé entries."""
    return uuid.uuid4().hex[:13]


class PrincipalStatus(str, Enum):
    """Registration state of a principal."""

    PENDING = "pending"  # Signed in, registration not completed
    ACTIVE = "active"    # Username chosen, registration completed


class Role(str, Enum):
    """Application role; only admins change it."""

    USER = "user"
    ADMIN = "admin"


class SocialLinks(BaseModel):
    """Public social profile links."""

    twitter: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""


# -----------------------------------------------------------------------------
# Résumé entries
# -----------------------------------------------------------------------------


class Education(BaseModel):
    id: str = Field(default_factory=generate_entry_id)
    institution: str
    degree: str = ""
    field: str = ""
    start_year: str = ""
    end_year: str = ""
    current: bool = False
    description: Optional[str] = None


class Experience(BaseModel):
    id: str = Field(default_factory=generate_entry_id)
    company: str
    position: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: Optional[str] = None


class Certification(BaseModel):
    id: str = Field(default_factory=generate_entry_id)
    name: str
    issuer: str = ""
    issue_date: str = ""
    expiry_date: Optional[str] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class Skill(BaseModel):
    id: str = Field(default_factory=generate_entry_id)
    name: str
    level: Optional[SkillLevel] = None


# -----------------------------------------------------------------------------
# Principal
# -----------------------------------------------------------------------------


class Principal(BaseModel):
    """
    Full principal record as stored in the users collection.

    The id is the identity provider's user id. Phone is private and never
    included in public views.
    """

    id: str = Field(..., description="Identity provider user ID")
    email: str = Field(default="", description="Email address")
    full_name: str = Field(default="", description="Display name")
    avatar_url: str = Field(default="", description="Avatar URL")
    bio: str = Field(default="", description="Short biography")
    username: str = Field(default="", description="Unique handle, set at registration")
    phone: str = Field(default="", description="Private phone number")
    profession: str = Field(default="", description="Profession")
    socials: SocialLinks = Field(default_factory=SocialLinks)
    status: PrincipalStatus = Field(default=PrincipalStatus.PENDING)
    role: Role = Field(default=Role.USER)
    bookmarks: list[str] = Field(default_factory=list, description="Bookmarked post IDs")

    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @property
    def is_active(self) -> bool:
        return self.status == PrincipalStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def public_view(self) -> "PublicProfile":
        return PublicProfile(**self.model_dump(exclude={"phone", "bookmarks", "email"}))


class PublicProfile(BaseModel):
    """Principal as shown on author pages."""

    id: str
    full_name: str = ""
    avatar_url: str = ""
    bio: str = ""
    username: str = ""
    profession: str = ""
    socials: SocialLinks = Field(default_factory=SocialLinks)
    status: PrincipalStatus = PrincipalStatus.PENDING
    role: Role = Role.USER
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)


class AuthorSummary(BaseModel):
    """Author details joined onto posts and comments."""

    id: str
    username: str = ""
    full_name: str = ""
    avatar_url: str = ""

    @classmethod
    def from_principal(cls, principal: Principal) -> "AuthorSummary":
        return cls(
            id=principal.id,
            username=principal.username,
            full_name=principal.full_name,
            avatar_url=principal.avatar_url,
        )


# -----------------------------------------------------------------------------
# Requests and responses
# -----------------------------------------------------------------------------


class CompleteRegistrationRequest(BaseModel):
    """Data collected by the one-time finish-registration flow."""

    username: str = Field(..., description="Desired handle (stored lower-cased)")
    full_name: str = Field(..., description="Display name")
    phone: str = Field(default="", description="Private phone number")
    profession: str = Field(default="")
    socials: SocialLinks = Field(default_factory=SocialLinks)


class UpdateProfileRequest(PartialUpdate):
    """Partial profile update; only fields that are set are written."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=120)
    bio: Optional[str] = Field(None, max_length=2000)
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    profession: Optional[str] = None
    socials: Optional[SocialLinks] = None
    education: Optional[list[Education]] = None
    experience: Optional[list[Experience]] = None
    certifications: Optional[list[Certification]] = None
    skills: Optional[list[Skill]] = None


class UsernameAvailability(BaseModel):
    """Result of the username pre-check."""

    username: str
    available: bool
    reason: Optional[str] = None


class BookmarkState(BaseModel):
    post_id: str
    bookmarked: bool
