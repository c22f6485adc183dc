"""Tests for the navigation guard chain."""

import pytest

from modules.navigation.guards import (
    NOT_FOUND_ROUTE,
    evaluate_navigation,
    is_admin_path,
    match_route,
    normalize_path,
)
from modules.navigation.models import GuardOutcome
from modules.profiles.models import PrincipalStatus, Role
from modules.session.models import SessionSnapshot
from tests.conftest import make_principal

LOADING = SessionSnapshot.initial()
SIGNED_OUT = SessionSnapshot.signed_out()
PENDING = SessionSnapshot.resolved(make_principal("u1", status=PrincipalStatus.PENDING))
ACTIVE = SessionSnapshot.resolved(make_principal("u1"))
ADMIN = SessionSnapshot.resolved(make_principal("a1", username="boss", role=Role.ADMIN))


class TestPathMatching:
    @pytest.mark.parametrize("raw,expected", [
        ("/blogs/", "/blogs"),
        ("blogs", "/blogs"),
        ("/search?q=python#top", "/search"),
        ("", "/"),
        ("///", "/"),
    ])
    def test_normalize_path(self, raw, expected):
        assert normalize_path(raw) == expected

    def test_parameterised_routes(self):
        assert match_route("/blog/my-first-post").name == "blog_detail"
        assert match_route("/author/abc123").name == "author"
        assert match_route("/edit-blog/draft").name == "edit_blog"

    def test_unknown_path_is_catch_all(self):
        assert match_route("/nope") is NOT_FOUND_ROUTE
        assert match_route("/blog/a/b") is NOT_FOUND_ROUTE

    def test_admin_prefix(self):
        assert is_admin_path("/admin")
        assert is_admin_path("/admin/anything")
        assert not is_admin_path("/administrator")


class TestLoadingGate:
    @pytest.mark.parametrize("path", ["/", "/profile", "/admin", "/nope"])
    def test_loading_blocks_every_route(self, path):
        assert evaluate_navigation(path, LOADING).outcome == GuardOutcome.LOADING


class TestRegistrationGate:
    def test_pending_principal_is_sent_to_finish_profile(self):
        for path in ("/", "/blogs", "/create-blog", "/admin"):
            decision = evaluate_navigation(path, PENDING)
            assert decision.outcome == GuardOutcome.REDIRECT
            assert decision.redirect_to == "/finish-profile"

    def test_pending_principal_may_finish_profile(self):
        decision = evaluate_navigation("/finish-profile", PENDING)
        assert decision.outcome == GuardOutcome.RENDER

    def test_pending_principal_may_open_sign_in(self):
        assert evaluate_navigation("/login", PENDING).outcome == GuardOutcome.RENDER

    def test_active_principal_leaves_finish_profile(self):
        decision = evaluate_navigation("/finish-profile", ACTIVE)
        assert decision.outcome == GuardOutcome.REDIRECT
        assert decision.redirect_to == "/profile"


class TestAuthenticationGate:
    @pytest.mark.parametrize("path", ["/create-blog", "/profile", "/bookmarks", "/edit-blog/x"])
    def test_signed_out_is_sent_to_sign_in(self, path):
        decision = evaluate_navigation(path, SIGNED_OUT)
        assert decision.outcome == GuardOutcome.REDIRECT
        assert decision.redirect_to == "/login"

    @pytest.mark.parametrize("path", ["/", "/blogs", "/blog/hello", "/tags", "/contact"])
    def test_public_routes_render_for_visitors(self, path):
        assert evaluate_navigation(path, SIGNED_OUT).outcome == GuardOutcome.RENDER


class TestAdminGate:
    def test_signed_out_visitor_is_denied(self):
        decision = evaluate_navigation("/admin/users", SIGNED_OUT)
        assert decision.outcome == GuardOutcome.ACCESS_DENIED
        assert decision.principal_id is None

    def test_non_admin_is_denied_with_details(self):
        decision = evaluate_navigation("/admin", ACTIVE)
        assert decision.outcome == GuardOutcome.ACCESS_DENIED
        assert decision.principal_id == "u1"
        assert decision.role == Role.USER

    def test_unknown_admin_path_is_still_guarded(self):
        assert evaluate_navigation("/admin/secret", ACTIVE).outcome == GuardOutcome.ACCESS_DENIED

    def test_admin_renders(self):
        decision = evaluate_navigation("/admin/blogs", ADMIN)
        assert decision.outcome == GuardOutcome.RENDER
        assert decision.route == "admin_blogs"

    def test_admin_unknown_path_is_not_found(self):
        assert evaluate_navigation("/admin/secret", ADMIN).outcome == GuardOutcome.NOT_FOUND


class TestRender:
    def test_not_found(self):
        decision = evaluate_navigation("/does-not-exist", ACTIVE)
        assert decision.outcome == GuardOutcome.NOT_FOUND
        assert decision.route == "not_found"

    def test_signed_in_route(self):
        assert evaluate_navigation("/create-blog", ACTIVE).outcome == GuardOutcome.RENDER
