"""
Route guard chain.

Every navigation is evaluated against the current SessionSnapshot by a
fixed sequence of gates; the first gate that returns a decision wins:

1. loading: identity not resolved yet
2. registration: pending principals are held on /finish-profile
3. authentication: signed-out visitors go to /login
4. admin: non-admins see an access-denied view in place
5. render the matched route, or the not-found view
"""

from typing import Callable, Optional, Sequence

from modules.session.models import SessionSnapshot

from .models import GuardDecision, GuardOutcome, RouteAccess, RouteDefinition

SIGN_IN_PATH = "/login"
FINISH_PROFILE_PATH = "/finish-profile"
PROFILE_PATH = "/profile"
ADMIN_PREFIX = "/admin"

DEFAULT_ROUTES: tuple[RouteDefinition, ...] = (
    RouteDefinition(name="login", pattern=SIGN_IN_PATH, access=RouteAccess.SIGN_IN),
    # Public
    RouteDefinition(name="home", pattern="/", access=RouteAccess.PUBLIC),
    RouteDefinition(name="blogs", pattern="/blogs", access=RouteAccess.PUBLIC),
    RouteDefinition(name="blog_detail", pattern="/blog/:slug", access=RouteAccess.PUBLIC),
    RouteDefinition(name="author", pattern="/author/:authorId", access=RouteAccess.PUBLIC),
    RouteDefinition(name="categories", pattern="/categories", access=RouteAccess.PUBLIC),
    RouteDefinition(name="tags", pattern="/tags", access=RouteAccess.PUBLIC),
    RouteDefinition(name="about", pattern="/about", access=RouteAccess.PUBLIC),
    RouteDefinition(name="contact", pattern="/contact", access=RouteAccess.PUBLIC),
    RouteDefinition(name="search", pattern="/search", access=RouteAccess.PUBLIC),
    RouteDefinition(name="privacy", pattern="/privacy", access=RouteAccess.PUBLIC),
    RouteDefinition(name="security", pattern="/security", access=RouteAccess.PUBLIC),
    # Signed-in
    RouteDefinition(name="finish_profile", pattern=FINISH_PROFILE_PATH, access=RouteAccess.AUTHENTICATED),
    RouteDefinition(name="create_blog", pattern="/create-blog", access=RouteAccess.AUTHENTICATED),
    RouteDefinition(name="profile", pattern=PROFILE_PATH, access=RouteAccess.AUTHENTICATED),
    RouteDefinition(name="edit_profile", pattern="/profile/edit", access=RouteAccess.AUTHENTICATED),
    RouteDefinition(name="edit_blog", pattern="/edit-blog/:slug", access=RouteAccess.AUTHENTICATED),
    RouteDefinition(name="bookmarks", pattern="/bookmarks", access=RouteAccess.AUTHENTICATED),
    # Admin
    RouteDefinition(name="admin_dashboard", pattern=ADMIN_PREFIX, access=RouteAccess.ADMIN),
    RouteDefinition(name="admin_users", pattern="/admin/users", access=RouteAccess.ADMIN),
    RouteDefinition(name="admin_blogs", pattern="/admin/blogs", access=RouteAccess.ADMIN),
)

NOT_FOUND_ROUTE = RouteDefinition(name="not_found", pattern="*", access=RouteAccess.NOT_FOUND)


def normalize_path(path: str) -> str:
    """Drop query string and fragment, ensure a leading slash, trim trailing slashes."""
    path = path.split("#", 1)[0].split("?", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


def _segments_match(pattern: str, path: str) -> bool:
    pattern_parts = pattern.strip("/").split("/")
    path_parts = path.strip("/").split("/")
    if len(pattern_parts) != len(path_parts):
        return False
    return all(
        (p.startswith(":") and bool(s)) or p == s
        for p, s in zip(pattern_parts, path_parts)
    )


def is_admin_path(path: str) -> bool:
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


def match_route(path: str, routes: Sequence[RouteDefinition] = DEFAULT_ROUTES) -> RouteDefinition:
    """Return the first route whose pattern matches, else the catch-all."""
    path = normalize_path(path)
    for route in routes:
        if _segments_match(route.pattern, path):
            return route
    return NOT_FOUND_ROUTE


# -----------------------------------------------------------------------------
# Gates
# -----------------------------------------------------------------------------

Gate = Callable[[str, RouteDefinition, SessionSnapshot], Optional[GuardDecision]]


def loading_gate(path: str, route: RouteDefinition, snapshot: SessionSnapshot) -> Optional[GuardDecision]:
    if snapshot.loading:
        return GuardDecision(outcome=GuardOutcome.LOADING, path=path, route=route.name)
    return None


def registration_gate(path: str, route: RouteDefinition, snapshot: SessionSnapshot) -> Optional[GuardDecision]:
    principal = snapshot.principal
    if route.access == RouteAccess.SIGN_IN or principal is None:
        return None
    on_finish_profile = path == FINISH_PROFILE_PATH
    if not principal.is_active and not on_finish_profile:
        return GuardDecision(
            outcome=GuardOutcome.REDIRECT, path=path, route=route.name,
            redirect_to=FINISH_PROFILE_PATH,
        )
    if principal.is_active and on_finish_profile:
        return GuardDecision(
            outcome=GuardOutcome.REDIRECT, path=path, route=route.name,
            redirect_to=PROFILE_PATH,
        )
    return None


def authentication_gate(path: str, route: RouteDefinition, snapshot: SessionSnapshot) -> Optional[GuardDecision]:
    if route.access == RouteAccess.AUTHENTICATED and snapshot.principal is None:
        return GuardDecision(
            outcome=GuardOutcome.REDIRECT, path=path, route=route.name,
            redirect_to=SIGN_IN_PATH,
        )
    return None


def admin_gate(path: str, route: RouteDefinition, snapshot: SessionSnapshot) -> Optional[GuardDecision]:
    if not is_admin_path(path):
        return None
    principal = snapshot.principal
    if principal is None or not principal.is_admin:
        return GuardDecision(
            outcome=GuardOutcome.ACCESS_DENIED,
            path=path,
            route=route.name,
            principal_id=principal.id if principal else None,
            role=principal.role if principal else None,
        )
    return None


def render_gate(path: str, route: RouteDefinition, snapshot: SessionSnapshot) -> GuardDecision:
    if route.access == RouteAccess.NOT_FOUND:
        return GuardDecision(outcome=GuardOutcome.NOT_FOUND, path=path, route=route.name)
    return GuardDecision(outcome=GuardOutcome.RENDER, path=path, route=route.name)


GUARD_CHAIN: tuple[Gate, ...] = (
    loading_gate,
    registration_gate,
    authentication_gate,
    admin_gate,
)


def evaluate_navigation(
    path: str,
    snapshot: SessionSnapshot,
    routes: Sequence[RouteDefinition] = DEFAULT_ROUTES,
) -> GuardDecision:
    """Run the guard chain for one navigation. Pure: no side effects."""
    path = normalize_path(path)
    route = match_route(path, routes)
    for gate in GUARD_CHAIN:
        decision = gate(path, route, snapshot)
        if decision is not None:
            return decision
    return render_gate(path, route, snapshot)
