"""
Remote Data Gateway data models.

Query building blocks, atomic field operations and the opaque pagination
cursor shared by every gateway implementation.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from .exceptions import InvalidCursorError


# Logical collections
USERS = "users"
POSTS = "posts"
COMMENTS = "comments"
CONTACTS = "contacts"

Document = dict[str, Any]
Unsubscribe = Callable[[], None]


class FilterOp(str, Enum):
    """Comparison operators supported by query_documents."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    IN = "in"
    ARRAY_CONTAINS = "array_contains"


@dataclass(frozen=True)
class Filter:
    """A single field predicate."""

    field: str
    op: FilterOp = FilterOp.EQ
    value: Any = None


@dataclass(frozen=True)
class OrderBy:
    """Sort key for a query."""

    field: str
    descending: bool = False


class QueryPage(BaseModel):
    """One page of query results plus the cursor for the next page."""

    documents: list[Document] = Field(default_factory=list)
    cursor: Optional[str] = Field(
        None,
        description="Opaque token for the last document of this page",
    )


# -----------------------------------------------------------------------------
# Atomic field operations, applied on the remote side
# -----------------------------------------------------------------------------


class FieldOperation:
    """Marker base for values that update_document applies atomically."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({vars(self)})"


class Increment(FieldOperation):
    def __init__(self, amount: int = 1):
        self.amount = amount


class ArrayUnion(FieldOperation):
    """Append each value that is not already present."""

    def __init__(self, *values: Any):
        self.values = list(values)


class ArrayRemove(FieldOperation):
    """Remove every occurrence of each value."""

    def __init__(self, *values: Any):
        self.values = list(values)


class ServerTimestamp(FieldOperation):
    """Resolved to the backend's current time when the write is applied."""

    pass


# -----------------------------------------------------------------------------
# Cursor encoding
# -----------------------------------------------------------------------------


class CursorPosition(BaseModel):
    """Decoded form of a pagination cursor."""

    id: str
    values: dict[str, Any] = Field(default_factory=dict)


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def encode_cursor(document: Document, order: list[OrderBy]) -> str:
    """Build the cursor token pointing at ``document``."""
    payload = {
        "id": document["id"],
        "values": {o.field: _jsonable(document.get(o.field)) for o in order},
    }
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).decode()


def decode_cursor(token: str) -> CursorPosition:
    """Decode a cursor token produced by encode_cursor."""
    try:
        raw = base64.urlsafe_b64decode(token.encode())
        return CursorPosition(**json.loads(raw))
    except (binascii.Error, ValueError, TypeError) as e:
        raise InvalidCursorError(token) from e
