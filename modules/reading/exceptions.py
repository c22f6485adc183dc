"""
Reading module exceptions.
"""

from shared.exceptions import AuthenticationError, BloggazersError


class NotSignedInError(AuthenticationError):
    """Raised when an anonymous reader attempts a signed-in action."""

    def __init__(self, action: str):
        super().__init__(
            f"Sign in to {action}",
            code="NOT_SIGNED_IN",
            details={"action": action},
        )


class ReaderNotOpenError(BloggazersError):
    """Raised when reader state is accessed before open()."""

    def __init__(self) -> None:
        super().__init__("No post has been opened", code="READER_NOT_OPEN")
