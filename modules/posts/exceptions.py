"""
Posts module exceptions.
"""

from shared.exceptions import AuthorizationError, NotFoundError, ValidationError


class PostNotFoundError(NotFoundError):
    """Raised when a post does not exist."""

    def __init__(self, key: str):
        super().__init__(
            f"Post not found: {key}",
            code="POST_NOT_FOUND",
            details={"post": key},
        )


class PostAccessDeniedError(AuthorizationError):
    """Raised when a principal modifies a post they do not own."""

    def __init__(self, post_id: str, principal_id: str):
        super().__init__(
            "You can only modify your own posts",
            code="POST_ACCESS_DENIED",
            details={"post_id": post_id, "user_id": principal_id},
        )


class InvalidPostTitleError(ValidationError):
    """Raised when a title yields an empty slug."""

    def __init__(self, title: str):
        super().__init__(
            "Title must contain at least one letter or digit",
            code="INVALID_TITLE",
            details={"title": title},
        )
