"""
Navigation module.

Client route table and the guard chain deciding, for a path and a session
snapshot, whether to render, redirect, deny or show not-found.
"""

from .guards import (
    DEFAULT_ROUTES,
    NOT_FOUND_ROUTE,
    GUARD_CHAIN,
    evaluate_navigation,
    match_route,
    normalize_path,
    is_admin_path,
)
from .models import GuardDecision, GuardOutcome, RouteAccess, RouteDefinition

__all__ = [
    "DEFAULT_ROUTES",
    "NOT_FOUND_ROUTE",
    "GUARD_CHAIN",
    "evaluate_navigation",
    "match_route",
    "normalize_path",
    "is_admin_path",
    "GuardDecision",
    "GuardOutcome",
    "RouteAccess",
    "RouteDefinition",
]
