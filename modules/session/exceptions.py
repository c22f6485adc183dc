"""
Session module exceptions.
"""

from shared.exceptions import BloggazersError


class IdentityResolutionTimeoutError(BloggazersError):
    """Raised when the identity state stays in loading past the timeout."""

    def __init__(self, timeout: float):
        super().__init__(
            f"Identity resolution did not complete within {timeout:g}s",
            code="IDENTITY_RESOLUTION_TIMEOUT",
            details={"timeout": timeout},
        )


class SessionClosedError(BloggazersError):
    """Raised when a closed session context is used."""

    def __init__(self) -> None:
        super().__init__("Session context is closed", code="SESSION_CLOSED")
