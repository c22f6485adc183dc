"""
Remote Data Gateway interface.

Every module reaches the backend-as-a-service (documents, auth events,
file storage) through IDocumentGateway. Implementations: SupabaseGateway
for production and InMemoryGateway for development and tests.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from shared.models import Identity

from .models import Document, Filter, OrderBy, QueryPage, Unsubscribe


@runtime_checkable
class IDocumentGateway(Protocol):
    """
    Interface for the external document store, auth and storage.

    Documents are plain dicts keyed by generated ids and always carry
    their own ``id``. Change values passed to update_document may be
    FieldOperation instances (Increment, ArrayUnion, ArrayRemove,
    ServerTimestamp); those are applied atomically on the remote side.
    """

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        """
        Fetch a single document.

        Returns:
            The document, or None if it does not exist
        """
        ...

    async def query_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
        order: Optional[list[OrderBy]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> QueryPage:
        """
        Query a collection.

        Args:
            collection: Collection name
            filters: Predicates combined with AND
            order: Sort keys, most significant first
            limit: Maximum number of documents
            cursor: Token from a previous page; results start after it

        Returns:
            QueryPage with the documents and the cursor of the last one
        """
        ...

    async def count_documents(
        self,
        collection: str,
        filters: Optional[list[Filter]] = None,
    ) -> int:
        """Count the documents matching the filters."""
        ...

    async def set_document(self, collection: str, document_id: str, data: Document) -> None:
        """Create or replace a document."""
        ...

    async def add_document(self, collection: str, data: Document) -> str:
        """Create a document with a generated id and return the id."""
        ...

    async def update_document(
        self,
        collection: str,
        document_id: str,
        changes: dict[str, Any],
    ) -> None:
        """
        Update fields of an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document (no error if it is already gone)."""
        ...

    async def batch_delete(self, collection: str, document_ids: list[str]) -> None:
        """Delete several documents in one atomic operation."""
        ...

    async def upload_file(self, data: bytes, path: str, content_type: str) -> str:
        """Store a file and return its public URL."""
        ...

    def subscribe_to_auth_state(
        self,
        callback: Callable[[Optional[Identity]], None],
    ) -> Unsubscribe:
        """
        Listen to sign-in / sign-out events.

        The callback receives the signed-in Identity, or None when signed out.
        """
        ...

    def subscribe_to_document(
        self,
        collection: str,
        document_id: str,
        callback: Callable[[Optional[Document]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        """
        Listen to changes of one document.

        The callback is invoked immediately with the current snapshot and
        again after every change; None means the document does not exist.
        """
        ...

    async def sign_out(self) -> None:
        """End the current identity-provider session."""
        ...
