"""Tests for posts module models."""

import pytest
from pydantic import ValidationError

from modules.posts.models import Category, CreatePostRequest, Post, UpdatePostRequest, parse_tags


class TestParseTags:
    @pytest.mark.parametrize("raw,expected", [
        ("python, web ,  ,api", ["python", "web", "api"]),
        (["  a ", "", "b"], ["a", "b"]),
        ("", []),
        (None, []),
    ])
    def test_parse_tags(self, raw, expected):
        assert parse_tags(raw) == expected


class TestRequests:
    def test_create_accepts_comma_separated_tags(self):
        request = CreatePostRequest(title="T", content="C", tags="a, b")
        assert request.tags == ["a", "b"]
        assert request.category == Category.GENERAL
        assert request.published is True

    def test_create_requires_title_and_content(self):
        with pytest.raises(ValidationError):
            CreatePostRequest(title="", content="C")
        with pytest.raises(ValidationError):
            CreatePostRequest(title="T", content="")

    def test_update_tracks_unset_fields(self):
        request = UpdatePostRequest(tags="x,y")
        assert request.model_dump(exclude_unset=True) == {"tags": ["x", "y"]}

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            CreatePostRequest(title="T", content="C", category="Cooking")


class TestPost:
    def test_like_helpers(self):
        post = Post(id="p1", author_id="a", title="T", slug="t", likes=["u1", "u2"])
        assert post.like_count == 2
        assert post.is_liked_by("u1")
        assert not post.is_liked_by("u3")
