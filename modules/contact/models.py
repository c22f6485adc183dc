"""
Contact module data models.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class ContactMessageRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    message: str = Field(..., min_length=1, max_length=5000)


class ContactMessage(BaseModel):
    id: str
    name: str
    email: str
    message: str
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}
