"""
Domain error hierarchy.

Module exceptions subclass one of the bases below. api/errors.py maps
each base to an HTTP status, and every error renders as
{"error": code, "message": ..., "details": {...}}.
"""

from typing import Any, Optional


class BloggazersError(Exception):
    """Root of all domain errors; the code is machine-readable and stable."""

    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details) if details else {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class NotFoundError(BloggazersError):
    """A user, post or comment does not exist (or is hidden from the caller)."""

    default_code = "NOT_FOUND"


class ValidationError(BloggazersError):
    default_code = "VALIDATION_ERROR"


class ConflictError(BloggazersError):
    """The resource's current state forbids the change (taken username, second edit)."""

    default_code = "CONFLICT"


class AuthenticationError(BloggazersError):
    default_code = "AUTHENTICATION_REQUIRED"


class AuthorizationError(BloggazersError):
    """Signed in, but not allowed: pending registration, wrong role, not the author."""

    default_code = "FORBIDDEN"


class ExternalServiceError(BloggazersError):
    """The backend-as-a-service failed; details name the service."""

    default_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        service: str = "supabase",
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
