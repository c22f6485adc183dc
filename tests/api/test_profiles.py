"""Tests for the profile endpoints."""

import pytest

from tests.conftest import auth_header, make_principal


class TestMyProfile:
    def test_first_contact_creates_pending_profile(self, client):
        response = client.get("/api/profiles/me", headers=auth_header(user_id="new-user"))

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "new-user"
        assert data["status"] == "pending"
        assert data["username"] == ""

    def test_finish_registration(self, client):
        headers = auth_header(user_id="new-user")
        client.get("/api/profiles/me", headers=headers)

        response = client.post(
            "/api/profiles/me/finish",
            headers=headers,
            json={"username": "Ada_L", "full_name": "Ada Lovelace", "phone": "555"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "active"
        assert data["username"] == "ada_l"

    def test_finish_registration_twice_conflicts(self, client, active_user):
        response = client.post(
            "/api/profiles/me/finish",
            headers=auth_header(),
            json={"username": "another", "full_name": "Test"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "REGISTRATION_COMPLETED"

    def test_finish_registration_with_taken_username(self, client, active_user):
        response = client.post(
            "/api/profiles/me/finish",
            headers=auth_header(user_id="new-user"),
            json={"username": "Tester", "full_name": "Someone"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "USERNAME_TAKEN"

    def test_finish_registration_with_bad_username(self, client):
        response = client.post(
            "/api/profiles/me/finish",
            headers=auth_header(user_id="new-user"),
            json={"username": "no spaces", "full_name": "Someone"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_USERNAME"

    def test_update_requires_active_principal(self, client, pending_user):
        response = client.patch(
            "/api/profiles/me",
            headers=auth_header(user_id=pending_user.id),
            json={"bio": "hello"},
        )

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "REGISTRATION_INCOMPLETE"
        assert body["details"]["redirect_to"] == "/finish-profile"

    def test_update_profile(self, client, active_user):
        response = client.patch(
            "/api/profiles/me",
            headers=auth_header(),
            json={"bio": "Writes things", "skills": [{"name": "Python", "level": "Expert"}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Writes things"
        assert data["skills"][0]["name"] == "Python"
        assert data["skills"][0]["id"]

    @pytest.mark.parametrize("field", ["bio", "full_name", "socials", "skills"])
    def test_update_with_null_field_is_rejected(self, client, active_user, field):
        response = client.patch(
            "/api/profiles/me",
            headers=auth_header(),
            json={field: None},
        )

        assert response.status_code == 422
        assert field in response.text

        # The stored profile is untouched and still loads
        profile = client.get("/api/profiles/me", headers=auth_header())
        assert profile.status_code == 200
        assert profile.json()["full_name"] == active_user.full_name


class TestUsernameCheck:
    def test_available(self, client):
        response = client.get("/api/profiles/check-username", params={"username": "Fresh"})
        assert response.json() == {"username": "fresh", "available": True, "reason": None}

    def test_taken(self, client, active_user):
        response = client.get("/api/profiles/check-username", params={"username": "tester"})
        assert response.json()["available"] is False

    def test_too_short(self, client):
        response = client.get("/api/profiles/check-username", params={"username": "ab"})
        data = response.json()
        assert data["available"] is False
        assert "at least 3" in data["reason"]


class TestBookmarks:
    def test_add_and_remove(self, client, active_user):
        headers = auth_header()

        added = client.put("/api/profiles/me/bookmarks/post-1", headers=headers)
        assert added.json() == {"post_id": "post-1", "bookmarked": True}
        assert client.get("/api/profiles/me", headers=headers).json()["bookmarks"] == ["post-1"]

        removed = client.delete("/api/profiles/me/bookmarks/post-1", headers=headers)
        assert removed.json() == {"post_id": "post-1", "bookmarked": False}
        assert client.get("/api/profiles/me", headers=headers).json()["bookmarks"] == []

    def test_list_bookmarked_posts(self, client, active_user):
        headers = auth_header()
        post = client.post("/api/posts", headers=headers, json={"title": "Saved", "content": "x"}).json()
        client.put(f"/api/profiles/me/bookmarks/{post['id']}", headers=headers)

        response = client.get("/api/profiles/me/bookmarks", headers=headers)

        assert [p["id"] for p in response.json()] == [post["id"]]


class TestPublicProfiles:
    def test_public_profile_hides_private_fields(self, client, seed):
        seed(make_principal(user_id="author-1", username="writer", phone="555-0100"))

        response = client.get("/api/profiles/author-1")

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "writer"
        assert "phone" not in data
        assert "email" not in data
        assert "bookmarks" not in data

    def test_by_username(self, client, active_user):
        response = client.get("/api/profiles/by-username/TESTER")
        assert response.status_code == 200
        assert response.json()["id"] == active_user.id

    def test_unknown_profile(self, client):
        assert client.get("/api/profiles/nobody").status_code == 404
        assert client.get("/api/profiles/by-username/nobody").status_code == 404

    def test_author_posts_include_drafts_only_for_author(self, client, active_user):
        headers = auth_header()
        client.post("/api/posts", headers=headers, json={"title": "Out", "content": "x"})
        client.post("/api/posts", headers=headers, json={"title": "Draft", "content": "x", "published": False})

        public = client.get(f"/api/profiles/{active_user.id}/posts")
        own = client.get(f"/api/profiles/{active_user.id}/posts", headers=headers)

        assert [p["title"] for p in public.json()] == ["Out"]
        assert sorted(p["title"] for p in own.json()) == ["Draft", "Out"]
