"""
Session module data models.
"""

from typing import Optional
from pydantic import BaseModel

from modules.profiles.models import Principal


class SessionSnapshot(BaseModel):
    """
    Observable identity state.

    loading is True until the first identity resolution completes; after
    that principal is None when signed out.
    """

    loading: bool
    principal: Optional[Principal] = None

    model_config = {"frozen": True}

    @property
    def signed_in(self) -> bool:
        return self.principal is not None

    @classmethod
    def initial(cls) -> "SessionSnapshot":
        return cls(loading=True)

    @classmethod
    def signed_out(cls) -> "SessionSnapshot":
        return cls(loading=False)

    @classmethod
    def resolved(cls, principal: Optional[Principal]) -> "SessionSnapshot":
        return cls(loading=False, principal=principal)
