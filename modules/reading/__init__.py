"""
Reading module.

PostReader keeps the local state of one open post and routes every
reaction (likes, bookmarks, comment likes, edits and deletes) through the
optimistic apply/commit/revert helper.
"""

from .reader import PostReader, ReadingView
from .exceptions import NotSignedInError, ReaderNotOpenError

__all__ = [
    "PostReader",
    "ReadingView",
    "NotSignedInError",
    "ReaderNotOpenError",
]
