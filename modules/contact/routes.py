"""
Contact form API endpoint.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_contact_service

from .models import ContactMessage, ContactMessageRequest
from .service import ContactService

router = APIRouter()


@router.post("", response_model=ContactMessage, status_code=201)
async def submit_contact_message(
    request: ContactMessageRequest,
    service: ContactService = Depends(get_contact_service),
) -> ContactMessage:
    """Store a message from the public contact form."""
    return await service.submit_message(request)
