"""Tests for the comment endpoints."""

import pytest

from tests.conftest import auth_header, make_principal


@pytest.fixture
def post(client, active_user):
    response = client.post("/api/posts", headers=auth_header(), json={"title": "Thread", "content": "x"})
    return response.json()


def comment(client, post_id, content, parent_id=None, headers=None):
    response = client.post(
        f"/api/comments/posts/{post_id}",
        headers=headers or auth_header(),
        json={"content": content, "parent_id": parent_id},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCommentThreads:
    def test_add_and_reply(self, client, post):
        top = comment(client, post["id"], "Top")
        reply = comment(client, post["id"], "Reply", parent_id=top["id"])

        thread = client.get(f"/api/comments/posts/{post['id']}").json()

        assert thread["total"] == 2
        assert len(thread["tree"]) == 1
        assert thread["tree"][0]["id"] == top["id"]
        assert thread["tree"][0]["children"][0]["id"] == reply["id"]
        assert top["author"]["username"] == "tester"

    def test_comment_on_missing_post(self, client, active_user):
        response = client.post("/api/comments/posts/missing", headers=auth_header(), json={"content": "hi"})
        assert response.status_code == 404

    def test_blank_comment_rejected(self, client, post):
        response = client.post(
            f"/api/comments/posts/{post['id']}", headers=auth_header(), json={"content": "   "}
        )
        assert response.status_code == 422

    def test_reply_to_comment_of_other_post(self, client, post):
        other = client.post("/api/posts", headers=auth_header(), json={"title": "Other", "content": "x"}).json()
        foreign = comment(client, other["id"], "Elsewhere")

        response = client.post(
            f"/api/comments/posts/{post['id']}",
            headers=auth_header(),
            json={"content": "Reply", "parent_id": foreign["id"]},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_PARENT_COMMENT"

    def test_pending_user_cannot_comment(self, client, post, pending_user):
        response = client.post(
            f"/api/comments/posts/{post['id']}",
            headers=auth_header(user_id=pending_user.id),
            json={"content": "hi"},
        )
        assert response.status_code == 403


class TestEditAndDelete:
    def test_edit_once(self, client, post):
        created = comment(client, post["id"], "Frist")

        first = client.patch(f"/api/comments/{created['id']}", headers=auth_header(), json={"content": "First"})
        second = client.patch(f"/api/comments/{created['id']}", headers=auth_header(), json={"content": "1st"})

        assert first.status_code == 200
        assert first.json()["content"] == "First"
        assert first.json()["edited_at"] is not None
        assert second.status_code == 409
        assert second.json()["error"] == "COMMENT_ALREADY_EDITED"

    def test_edit_by_other_user(self, client, post, seed):
        created = comment(client, post["id"], "Mine")
        seed(make_principal(user_id="other", username="other"))

        response = client.patch(
            f"/api/comments/{created['id']}",
            headers=auth_header(user_id="other"),
            json={"content": "Hijacked"},
        )

        assert response.status_code == 403

    def test_delete_removes_replies(self, client, post):
        top = comment(client, post["id"], "Top")
        reply = comment(client, post["id"], "Reply", parent_id=top["id"])
        nested = comment(client, post["id"], "Nested", parent_id=reply["id"])
        keep = comment(client, post["id"], "Keep")

        response = client.delete(f"/api/comments/{top['id']}", headers=auth_header())

        assert response.status_code == 200
        assert response.json()["deleted_ids"][0] == top["id"]
        assert set(response.json()["deleted_ids"]) == {top["id"], reply["id"], nested["id"]}
        remaining = client.get(f"/api/comments/posts/{post['id']}").json()["comments"]
        assert [c["id"] for c in remaining] == [keep["id"]]

    def test_admin_deletes_any_comment(self, client, post, admin_user):
        created = comment(client, post["id"], "Spam")

        response = client.delete(f"/api/comments/{created['id']}", headers=auth_header(user_id=admin_user.id))

        assert response.status_code == 200

    def test_delete_unknown_comment(self, client, active_user):
        response = client.delete("/api/comments/nope", headers=auth_header())
        assert response.status_code == 404


def test_like_and_unlike_comment(client, post, active_user):
    created = comment(client, post["id"], "Nice")

    liked = client.put(f"/api/comments/{created['id']}/like", headers=auth_header())
    assert liked.json() == {"comment_id": created["id"], "liked": True}
    thread = client.get(f"/api/comments/posts/{post['id']}").json()
    assert thread["comments"][0]["likes"] == [active_user.id]

    unliked = client.delete(f"/api/comments/{created['id']}/like", headers=auth_header())
    assert unliked.json() == {"comment_id": created["id"], "liked": False}
