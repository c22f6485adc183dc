"""
Comments module exceptions.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class CommentNotFoundError(NotFoundError):
    """Raised when a comment does not exist."""

    def __init__(self, comment_id: str):
        super().__init__(
            f"Comment not found: {comment_id}",
            code="COMMENT_NOT_FOUND",
            details={"comment_id": comment_id},
        )


class CommentTargetNotFoundError(NotFoundError):
    """Raised when commenting on a post that does not exist."""

    def __init__(self, post_id: str):
        super().__init__(
            f"Post not found: {post_id}",
            code="POST_NOT_FOUND",
            details={"post_id": post_id},
        )


class InvalidParentCommentError(ValidationError):
    """Raised when a reply names a parent missing from the same post."""

    def __init__(self, parent_id: str, post_id: str):
        super().__init__(
            "Parent comment does not belong to this post",
            code="INVALID_PARENT_COMMENT",
            details={"parent_id": parent_id, "post_id": post_id},
        )


class CommentAccessDeniedError(AuthorizationError):
    """Raised when a principal modifies a comment they do not own."""

    def __init__(self, comment_id: str, principal_id: str):
        super().__init__(
            "You can only modify your own comments",
            code="COMMENT_ACCESS_DENIED",
            details={"comment_id": comment_id, "user_id": principal_id},
        )


class CommentAlreadyEditedError(ConflictError):
    """Raised on a second edit; a comment may be edited once."""

    def __init__(self, comment_id: str):
        super().__init__(
            "Comment has already been edited",
            code="COMMENT_ALREADY_EDITED",
            details={"comment_id": comment_id},
        )
