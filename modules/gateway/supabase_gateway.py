"""
Supabase-backed Remote Data Gateway.

Collections map to Postgres tables (see migrations/), files to a Storage
bucket and auth events to Supabase Auth. Atomic field operations go
through the RPC functions created by 001_initial_schema.sql so that
concurrent likes, bookmarks and view increments never lose updates.

Document listeners are fanned out in-process after every write made
through this gateway.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from supabase import Client

from shared.models import Identity

from .exceptions import DocumentNotFoundError, GatewayError
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

logger = logging.getLogger(__name__)


def _apply_filter(query: Any, flt: Filter) -> Any:
    """Translate a Filter into a PostgREST query builder call."""
    if flt.op == FilterOp.EQ:
        return query.eq(flt.field, flt.value)
    if flt.op == FilterOp.NE:
        return query.neq(flt.field, flt.value)
    if flt.op == FilterOp.LT:
        return query.lt(flt.field, flt.value)
    if flt.op == FilterOp.LE:
        return query.lte(flt.field, flt.value)
    if flt.op == FilterOp.GT:
        return query.gt(flt.field, flt.value)
    if flt.op == FilterOp.GE:
        return query.gte(flt.field, flt.value)
    if flt.op == FilterOp.IN:
        return query.in_(flt.field, list(flt.value or []))
    return query.contains(flt.field, [flt.value])


def identity_from_session(session: Any) -> Optional[Identity]:
    """Build an Identity from a Supabase Auth session (None when signed out)."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None) or "",
        display_name=metadata.get("full_name") or metadata.get("name"),
        avatar_url=metadata.get("avatar_url") or metadata.get("picture"),
        email_verified=getattr(user, "email_confirmed_at", None) is not None,
    )


class SupabaseGateway:
    """
    Implementation of IDocumentGateway on top of supabase-py.

    All calls are wrapped so that backend failures surface as GatewayError.
    """

    def __init__(self, client: Client, bucket: str):
        self._db = client
        self._bucket = bucket
        self._listeners = ListenerRegistry()

    def _run(self, operation: str, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except (GatewayError, DocumentNotFoundError):
            raise
        except Exception as e:
            logger.error("Supabase %s failed: %s", operation, e)
            raise GatewayError(operation, str(e)) from e

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def _fetch(self, collection: str, document_id: str) -> Optional[Document]:
        result = self._db.table(collection).select("*").eq("id", document_id).execute()
        return result.data[0] if result.data else None

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        return self._run("get_document", lambda: self._fetch(collection, document_id))

    async def query_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
        order: Optional[list[OrderBy]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> QueryPage:
        order = order or []

        def call() -> list[Document]:
            query = self._db.table(collection).select("*")
            for flt in filters or []:
                query = _apply_filter(query, flt)
            if cursor and order:
                position = decode_cursor(cursor)
                primary = order[0]
                value = position.values.get(primary.field)
                if value is not None:
                    query = (
                        query.lt(primary.field, value)
                        if primary.descending
                        else query.gt(primary.field, value)
                    )
            for o in order:
                query = query.order(o.field, desc=o.descending)
            if limit is not None:
                query = query.limit(limit)
            return query.execute().data or []

        documents = self._run("query_documents", call)
        next_cursor = encode_cursor(documents[-1], order) if documents else None
        return QueryPage(documents=documents, cursor=next_cursor)

    async def count_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
    ) -> int:
        def call() -> int:
            query = self._db.table(collection).select("id", count="exact")
            for flt in filters or []:
                query = _apply_filter(query, flt)
            return query.execute().count or 0

        return self._run("count_documents", call)

    async def set_document(self, collection: str, document_id: str, data: Document) -> None:
        row = {**self._plain(data), "id": document_id}
        self._run(
            "set_document",
            lambda: self._db.table(collection).upsert(row).execute(),
        )
        self._listeners.notify_document(collection, document_id, row)

    async def add_document(self, collection: str, data: Document) -> str:
        document_id = str(uuid.uuid4())
        row = {**self._plain(data), "id": document_id}
        self._run(
            "add_document",
            lambda: self._db.table(collection).insert(row).execute(),
        )
        return document_id

    async def update_document(
        self,
        collection: str,
        document_id: str,
        changes: dict[str, Any],
    ) -> None:
        atomic = {
            k: v for k, v in changes.items()
            if isinstance(v, FieldOperation) and not isinstance(v, ServerTimestamp)
        }
        plain = {k: v for k, v in changes.items() if k not in atomic}

        def call() -> None:
            if plain:
                result = (
                    self._db.table(collection)
                    .update(self._plain(plain))
                    .eq("id", document_id)
                    .execute()
                )
                if not result.data:
                    raise DocumentNotFoundError(collection, document_id)
            for field, operation in atomic.items():
                self._apply_atomic(collection, document_id, field, operation)

        self._run("update_document", call)
        if self._listeners.listener_count(collection, document_id):
            snapshot = self._run("get_document", lambda: self._fetch(collection, document_id))
            self._listeners.notify_document(collection, document_id, snapshot)

    def _apply_atomic(
        self,
        collection: str,
        document_id: str,
        field: str,
        operation: FieldOperation,
    ) -> None:
        params: dict[str, Any] = {
            "p_table": collection,
            "p_id": document_id,
            "p_field": field,
        }
        if isinstance(operation, Increment):
            fn = "increment_field"
            params["p_amount"] = operation.amount
        elif isinstance(operation, ArrayUnion):
            fn = "array_union_field"
            params["p_values"] = operation.values
        elif isinstance(operation, ArrayRemove):
            fn = "array_remove_field"
            params["p_values"] = operation.values
        else:
            raise GatewayError("update_document", f"Unsupported operation {operation!r}")

        result = self._db.rpc(fn, params).execute()
        if result.data is False:
            raise DocumentNotFoundError(collection, document_id)

    @staticmethod
    def _plain(data: Document) -> Document:
        """Resolve ServerTimestamp and datetimes into JSON-friendly values."""
        resolved: Document = {}
        for field, value in data.items():
            if isinstance(value, ServerTimestamp):
                value = datetime.now(timezone.utc)
            if isinstance(value, datetime):
                value = value.isoformat()
            resolved[field] = value
        return resolved

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._run(
            "delete_document",
            lambda: self._db.table(collection).delete().eq("id", document_id).execute(),
        )
        self._listeners.notify_document(collection, document_id, None)

    async def batch_delete(self, collection: str, document_ids: list[str]) -> None:
        if not document_ids:
            return
        # Single statement, so the whole set goes or none of it does
        self._run(
            "batch_delete",
            lambda: self._db.table(collection).delete().in_("id", document_ids).execute(),
        )
        for document_id in document_ids:
            self._listeners.notify_document(collection, document_id, None)

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    async def upload_file(self, data: bytes, path: str, content_type: str) -> str:
        bucket = self._db.storage.from_(self._bucket)

        def call() -> str:
            bucket.upload(path, data, {"content-type": content_type})
            return bucket.get_public_url(path)

        return self._run("upload_file", call)

    # -------------------------------------------------------------------------
    # Auth and listeners
    # -------------------------------------------------------------------------

    def subscribe_to_auth_state(
        self,
        callback: Callable[[Optional[Identity]], None],
    ) -> Unsubscribe:
        def on_change(event: Any, session: Any) -> None:
            callback(identity_from_session(session))

        subscription = self._db.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe

    def subscribe_to_document(
        self,
        collection: str,
        document_id: str,
        callback: Callable[[Optional[Document]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        unsubscribe = self._listeners.add_document_listener(collection, document_id, callback)
        try:
            snapshot = self._run("get_document", lambda: self._fetch(collection, document_id))
        except GatewayError as e:
            if on_error is None:
                unsubscribe()
                raise
            on_error(e)
            return unsubscribe
        callback(snapshot)
        return unsubscribe

    async def sign_out(self) -> None:
        self._run("sign_out", lambda: self._db.auth.sign_out())
