"""
Contact module.

Messages submitted through the public contact form.
"""

from .service import ContactService
from .models import ContactMessage, ContactMessageRequest

__all__ = [
    "ContactService",
    "ContactMessage",
    "ContactMessageRequest",
]
