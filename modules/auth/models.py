"""
Authentication module data models.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class JWTPayload(BaseModel):
    """
    Decoded access token claims issued by Supabase Auth.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="Postgres role, not the app role")

    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "ignore"}
