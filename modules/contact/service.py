"""
Contact form service.
"""

import logging

from modules.gateway import CONTACTS, IDocumentGateway, ServerTimestamp

from .models import ContactMessage, ContactMessageRequest

logger = logging.getLogger(__name__)


class ContactService:
    """Stores messages sent through the contact form."""

    def __init__(self, gateway: IDocumentGateway):
        self._gateway = gateway

    async def submit_message(self, request: ContactMessageRequest) -> ContactMessage:
        message_id = await self._gateway.add_document(CONTACTS, {
            "name": request.name.strip(),
            "email": str(request.email),
            "message": request.message.strip(),
            "created_at": ServerTimestamp(),
        })
        logger.info(f"Stored contact message {message_id}")
        document = await self._gateway.get_document(CONTACTS, message_id)
        return ContactMessage(**(document or {"id": message_id, **request.model_dump()}))
