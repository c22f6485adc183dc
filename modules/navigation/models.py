"""
Navigation module data models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from modules.profiles.models import Role


class RouteAccess(str, Enum):
    """Who may open a route."""

    SIGN_IN = "sign_in"
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    NOT_FOUND = "not_found"


class RouteDefinition(BaseModel):
    """A client route; ":name" segments match any single path segment."""

    name: str
    pattern: str
    access: RouteAccess

    model_config = {"frozen": True}


class GuardOutcome(str, Enum):
    LOADING = "loading"              # Identity still resolving, render a spinner
    REDIRECT = "redirect"            # Navigate to redirect_to instead
    ACCESS_DENIED = "access_denied"  # Render the denial view in place
    RENDER = "render"                # Render the matched route
    NOT_FOUND = "not_found"          # Render the 404 view


class GuardDecision(BaseModel):
    """Result of evaluating the guard chain for one navigation."""

    outcome: GuardOutcome
    path: str
    route: Optional[str] = Field(None, description="Matched route name")
    redirect_to: Optional[str] = None
    principal_id: Optional[str] = Field(None, description="Set on ACCESS_DENIED when signed in")
    role: Optional[Role] = Field(None, description="Set on ACCESS_DENIED when signed in")

    model_config = {"frozen": True}
