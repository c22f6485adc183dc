"""
Navigation API endpoint.

Lets a client ask what a navigation to a path should do for the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_optional_principal
from modules.profiles.models import Principal
from modules.session.models import SessionSnapshot

from .guards import evaluate_navigation
from .models import GuardDecision

router = APIRouter()


@router.get("", response_model=GuardDecision)
async def navigate(
    path: str = Query(..., min_length=1, description="Client path, e.g. /admin/users"),
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> GuardDecision:
    """
    Evaluate the route guard chain for the caller.

    Anonymous callers are evaluated as signed out. The server always has
    a resolved identity, so LOADING is never returned here.
    """
    return evaluate_navigation(path, SessionSnapshot.resolved(principal))
