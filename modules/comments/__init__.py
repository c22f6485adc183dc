"""
Comments module.

Threaded comments: flat storage, tree reconstruction on read, one-time
edits, likes and cascading deletion of reply subtrees.

Public API:
- ICommentService: Interface for comment operations
- CommentService: Gateway-backed implementation
- build_comment_tree / collect_descendant_ids: Pure tree helpers
"""

from .interfaces import ICommentService
from .service import CommentService
from .tree import build_comment_tree, collect_descendant_ids
from .models import (
    Comment,
    CommentNode,
    CommentThread,
    CreateCommentRequest,
    EditCommentRequest,
    CommentLikeState,
    CommentDeleteResult,
)
from .exceptions import (
    CommentNotFoundError,
    CommentTargetNotFoundError,
    InvalidParentCommentError,
    CommentAccessDeniedError,
    CommentAlreadyEditedError,
)

__all__ = [
    # Interface
    "ICommentService",
    "CommentService",
    "build_comment_tree",
    "collect_descendant_ids",
    # Models
    "Comment",
    "CommentNode",
    "CommentThread",
    "CreateCommentRequest",
    "EditCommentRequest",
    "CommentLikeState",
    "CommentDeleteResult",
    # Exceptions
    "CommentNotFoundError",
    "CommentTargetNotFoundError",
    "InvalidParentCommentError",
    "CommentAccessDeniedError",
    "CommentAlreadyEditedError",
]
