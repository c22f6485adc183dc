"""
In-memory Remote Data Gateway.

For development and testing. Mirrors the semantics of SupabaseGateway:
atomic field operations, cursor pagination, batched deletes and
document/auth listeners.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from shared.models import Identity

from .exceptions import DocumentNotFoundError
from .listeners import ListenerRegistry
from .models import (
    ArrayRemove,
    ArrayUnion,
    Document,
    FieldOperation,
    Filter,
    FilterOp,
    Increment,
    OrderBy,
    QueryPage,
    ServerTimestamp,
    Unsubscribe,
    decode_cursor,
    encode_cursor,
)


def _matches(document: Document, flt: Filter) -> bool:
    value = document.get(flt.field)
    if flt.op == FilterOp.EQ:
        return value == flt.value
    if flt.op == FilterOp.NE:
        return value != flt.value
    if flt.op == FilterOp.IN:
        return value in (flt.value or [])
    if flt.op == FilterOp.ARRAY_CONTAINS:
        return isinstance(value, list) and flt.value in value
    if value is None:
        return False
    if flt.op == FilterOp.LT:
        return value < flt.value
    if flt.op == FilterOp.LE:
        return value <= flt.value
    if flt.op == FilterOp.GT:
        return value > flt.value
    return value >= flt.value


def _sort_key(field: str) -> Callable[[Document], tuple]:
    # Missing values sort before present ones
    def key(document: Document) -> tuple:
        value = document.get(field)
        return (value is not None, value if value is not None else 0)

    return key


class InMemoryGateway:
    """
    Dict-backed implementation of IDocumentGateway.

    Also exposes emit_auth_state() so tests and local runs can simulate the
    identity provider signing a user in or out.
    """

    def __init__(self, bucket: str = "bloggazers") -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._files: dict[str, bytes] = {}
        self._bucket = bucket
        self._listeners = ListenerRegistry()
        self._identity: Optional[Identity] = None

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def _table(self, collection: str) -> dict[str, Document]:
        return self._collections.setdefault(collection, {})

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        document = self._table(collection).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def query_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
        order: Optional[list[OrderBy]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> QueryPage:
        filters = filters or []
        order = order or []

        results = [
            d for d in self._table(collection).values()
            if all(_matches(d, f) for f in filters)
        ]
        # Stable sorts, least significant key first
        for o in reversed(order):
            results.sort(key=_sort_key(o.field), reverse=o.descending)

        if cursor:
            position = decode_cursor(cursor)
            ids = [d["id"] for d in results]
            if position.id in ids:
                results = results[ids.index(position.id) + 1:]
            elif order:
                # Cursor document is gone; resume from its sort value
                primary = order[0]
                value = position.values.get(primary.field)
                results = [
                    d for d in results
                    if d.get(primary.field) is not None
                    and _compare(d.get(primary.field), value, primary.descending)
                ]

        if limit is not None:
            results = results[:limit]

        documents = [copy.deepcopy(d) for d in results]
        next_cursor = encode_cursor(documents[-1], order) if documents else None
        return QueryPage(documents=documents, cursor=next_cursor)

    async def count_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
    ) -> int:
        filters = filters or []
        return sum(
            1 for d in self._table(collection).values()
            if all(_matches(d, f) for f in filters)
        )

    async def set_document(self, collection: str, document_id: str, data: Document) -> None:
        document = {**self._resolve(data, {}), "id": document_id}
        self._table(collection)[document_id] = document
        self._listeners.notify_document(collection, document_id, copy.deepcopy(document))

    async def add_document(self, collection: str, data: Document) -> str:
        document_id = uuid.uuid4().hex
        await self.set_document(collection, document_id, data)
        return document_id

    async def update_document(
        self,
        collection: str,
        document_id: str,
        changes: dict[str, Any],
    ) -> None:
        table = self._table(collection)
        if document_id not in table:
            raise DocumentNotFoundError(collection, document_id)
        document = table[document_id]
        document.update(self._resolve(changes, document))
        self._listeners.notify_document(collection, document_id, copy.deepcopy(document))

    async def delete_document(self, collection: str, document_id: str) -> None:
        if self._table(collection).pop(document_id, None) is not None:
            self._listeners.notify_document(collection, document_id, None)

    async def batch_delete(self, collection: str, document_ids: list[str]) -> None:
        table = self._table(collection)
        removed = [i for i in document_ids if table.pop(i, None) is not None]
        for document_id in removed:
            self._listeners.notify_document(collection, document_id, None)

    def _resolve(self, changes: dict[str, Any], current: Document) -> Document:
        """Apply FieldOperation values against the current document."""
        resolved: Document = {}
        for field, value in changes.items():
            if not isinstance(value, FieldOperation):
                resolved[field] = copy.deepcopy(value)
            elif isinstance(value, Increment):
                resolved[field] = (current.get(field) or 0) + value.amount
            elif isinstance(value, ArrayUnion):
                items = list(current.get(field) or [])
                items.extend(v for v in value.values if v not in items)
                resolved[field] = items
            elif isinstance(value, ArrayRemove):
                resolved[field] = [
                    v for v in (current.get(field) or []) if v not in value.values
                ]
            elif isinstance(value, ServerTimestamp):
                resolved[field] = datetime.now(timezone.utc)
        return resolved

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    async def upload_file(self, data: bytes, path: str, content_type: str) -> str:
        self._files[path] = data
        return f"memory://{self._bucket}/{path}"

    def get_file(self, path: str) -> Optional[bytes]:
        return self._files.get(path)

    # -------------------------------------------------------------------------
    # Auth and listeners
    # -------------------------------------------------------------------------

    def subscribe_to_auth_state(
        self,
        callback: Callable[[Optional[Identity]], None],
    ) -> Unsubscribe:
        unsubscribe = self._listeners.add_auth_listener(callback)
        callback(self._identity)
        return unsubscribe

    def subscribe_to_document(
        self,
        collection: str,
        document_id: str,
        callback: Callable[[Optional[Document]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        unsubscribe = self._listeners.add_document_listener(collection, document_id, callback)
        document = self._table(collection).get(document_id)
        callback(copy.deepcopy(document) if document is not None else None)
        return unsubscribe

    def emit_auth_state(self, identity: Optional[Identity]) -> None:
        """Simulate the identity provider signing a user in (or out with None)."""
        self._identity = identity
        self._listeners.notify_auth(identity)

    async def sign_out(self) -> None:
        self.emit_auth_state(None)

    @property
    def listeners(self) -> ListenerRegistry:
        return self._listeners


def _compare(value: Any, pivot: Any, descending: bool) -> bool:
    if pivot is None:
        return True
    if isinstance(value, datetime) and isinstance(pivot, str):
        pivot = datetime.fromisoformat(pivot)
    return value < pivot if descending else value > pivot
