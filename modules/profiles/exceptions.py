"""
Profiles module exceptions.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class PrincipalNotFoundError(NotFoundError):
    """Raised when a principal document does not exist."""

    def __init__(self, principal_id: str):
        super().__init__(
            f"User not found: {principal_id}",
            code="USER_NOT_FOUND",
            details={"user_id": principal_id},
        )


class InvalidUsernameError(ValidationError):
    """Raised when a username fails the format rules."""

    def __init__(self, username: str, reason: str):
        super().__init__(
            reason,
            code="INVALID_USERNAME",
            details={"username": username},
        )


class UsernameTakenError(ConflictError):
    """Raised when the username pre-check finds an existing holder."""

    def __init__(self, username: str):
        super().__init__(
            "This username is already taken.",
            code="USERNAME_TAKEN",
            details={"username": username},
        )


class RegistrationAlreadyCompletedError(ConflictError):
    """Raised when an active principal tries to register again."""

    def __init__(self, principal_id: str):
        super().__init__(
            "Registration has already been completed",
            code="REGISTRATION_COMPLETED",
            details={"user_id": principal_id},
        )


class RegistrationIncompleteError(AuthorizationError):
    """Raised when a pending principal attempts an action reserved for active users."""

    def __init__(self, principal_id: str):
        super().__init__(
            "Finish registration before continuing",
            code="REGISTRATION_INCOMPLETE",
            details={"user_id": principal_id, "redirect_to": "/finish-profile"},
        )
