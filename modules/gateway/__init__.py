"""
Remote Data Gateway module.

The single seam to the backend-as-a-service: documents, atomic field
operations, batched deletes, file storage, auth-state and document
listeners.

Public API:
- IDocumentGateway: Interface every module depends on
- InMemoryGateway / SupabaseGateway: Implementations
- Query models: Filter, FilterOp, OrderBy, QueryPage
- Field operations: Increment, ArrayUnion, ArrayRemove, ServerTimestamp
"""

from .interfaces import IDocumentGateway
from .memory import InMemoryGateway
from .models import (
    USERS,
    POSTS,
    COMMENTS,
    CONTACTS,
    Document,
    Unsubscribe,
    Filter,
    FilterOp,
    OrderBy,
    QueryPage,
    FieldOperation,
    Increment,
    ArrayUnion,
    ArrayRemove,
    ServerTimestamp,
    encode_cursor,
    decode_cursor,
)
from .exceptions import GatewayError, DocumentNotFoundError, InvalidCursorError

__all__ = [
    # Interface
    "IDocumentGateway",
    "InMemoryGateway",
    # Collections
    "USERS",
    "POSTS",
    "COMMENTS",
    "CONTACTS",
    # Models
    "Document",
    "Unsubscribe",
    "Filter",
    "FilterOp",
    "OrderBy",
    "QueryPage",
    "FieldOperation",
    "Increment",
    "ArrayUnion",
    "ArrayRemove",
    "ServerTimestamp",
    "encode_cursor",
    "decode_cursor",
    # Exceptions
    "GatewayError",
    "DocumentNotFoundError",
    "InvalidCursorError",
]
