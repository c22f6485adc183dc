"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator


class Identity(BaseModel):
    """
    A signed-in identity as issued by the identity provider.

    Populated from JWT claims (API requests) or from the gateway's auth
    state events (session context). It carries no application-level data;
    status, role and the rest live on the principal document.
    """

    id: str = Field(..., description="Stable user ID issued by the identity provider")
    email: str = Field(default="", description="User's email address")
    display_name: Optional[str] = Field(None, description="Name reported by the provider")
    avatar_url: Optional[str] = Field(None, description="Photo URL reported by the provider")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }


class PartialUpdate(BaseModel):
    """
    Base for partial update bodies.

    A field may be omitted to leave it unchanged, but a field that is sent
    must carry a value: stored records have no null columns.
    """

    @model_validator(mode="before")
    @classmethod
    def _reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(k for k, v in data.items() if v is None and k in cls.model_fields)
            if nulls:
                raise ValueError(f"Fields may be omitted but not null: {', '.join(nulls)}")
        return data
