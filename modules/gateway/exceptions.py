"""
Remote Data Gateway exceptions.
"""

from shared.exceptions import ExternalServiceError, NotFoundError, ValidationError


class GatewayError(ExternalServiceError):
    """Raised when the backend-as-a-service rejects or fails an operation."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Remote {operation} failed: {message}",
            service="supabase",
            code="GATEWAY_ERROR",
            details={"operation": operation},
        )


class DocumentNotFoundError(NotFoundError):
    """Raised when updating a document that does not exist."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(
            f"Document not found: {collection}/{document_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"collection": collection, "document_id": document_id},
        )


class InvalidCursorError(ValidationError):
    """Raised when a pagination cursor cannot be decoded."""

    def __init__(self, cursor: str):
        super().__init__(
            "Invalid pagination cursor",
            code="INVALID_CURSOR",
            details={"cursor": cursor},
        )
