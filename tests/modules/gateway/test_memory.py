"""
Tests for the in-memory Remote Data Gateway.

These pin the semantics every gateway implementation shares: atomic field
operations, cursor pagination, batched deletes and listeners.
"""

from datetime import datetime, timedelta, timezone

import pytest

from modules.gateway import (
    POSTS,
    USERS,
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    Filter,
    FilterOp,
    IDocumentGateway,
    Increment,
    InMemoryGateway,
    InvalidCursorError,
    OrderBy,
    ServerTimestamp,
)
from shared.models import Identity

NEWEST_FIRST = [OrderBy("created_at", descending=True)]


@pytest.fixture
def gateway():
    return InMemoryGateway()


async def seed_posts(gateway, count):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(count):
        await gateway.set_document(POSTS, f"p{i}", {
            "title": f"Post {i}",
            "category": "tech" if i % 2 else "life",
            "tags": ["python"] if i % 3 == 0 else [],
            "created_at": start + timedelta(days=i),
        })


class TestProtocol:
    def test_implements_gateway_interface(self, gateway):
        assert isinstance(gateway, IDocumentGateway)


class TestDocuments:
    @pytest.mark.asyncio
    async def test_set_and_get(self, gateway):
        await gateway.set_document(USERS, "u1", {"full_name": "Ada"})
        document = await gateway.get_document(USERS, "u1")
        assert document == {"full_name": "Ada", "id": "u1"}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, gateway):
        assert await gateway.get_document(USERS, "missing") is None

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, gateway):
        await gateway.set_document(POSTS, "p1", {"likes": []})
        document = await gateway.get_document(POSTS, "p1")
        document["likes"].append("u1")
        assert (await gateway.get_document(POSTS, "p1"))["likes"] == []

    @pytest.mark.asyncio
    async def test_add_generates_id(self, gateway):
        document_id = await gateway.add_document(POSTS, {"title": "Hello"})
        assert (await gateway.get_document(POSTS, document_id))["title"] == "Hello"

    @pytest.mark.asyncio
    async def test_server_timestamp_is_resolved(self, gateway):
        await gateway.set_document(POSTS, "p1", {"created_at": ServerTimestamp()})
        created_at = (await gateway.get_document(POSTS, "p1"))["created_at"]
        assert isinstance(created_at, datetime)

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, gateway):
        with pytest.raises(DocumentNotFoundError):
            await gateway.update_document(POSTS, "missing", {"title": "x"})

    @pytest.mark.asyncio
    async def test_delete_and_batch_delete(self, gateway):
        await seed_posts(gateway, 4)
        await gateway.delete_document(POSTS, "p0")
        await gateway.batch_delete(POSTS, ["p1", "p2", "not-there"])
        assert await gateway.count_documents(POSTS) == 1


class TestFieldOperations:
    @pytest.mark.asyncio
    async def test_increment(self, gateway):
        await gateway.set_document(POSTS, "p1", {"views": 2})
        await gateway.update_document(POSTS, "p1", {"views": Increment(1)})
        await gateway.update_document(POSTS, "p1", {"views": Increment(3)})
        assert (await gateway.get_document(POSTS, "p1"))["views"] == 6

    @pytest.mark.asyncio
    async def test_increment_missing_field_starts_at_zero(self, gateway):
        await gateway.set_document(POSTS, "p1", {})
        await gateway.update_document(POSTS, "p1", {"views": Increment()})
        assert (await gateway.get_document(POSTS, "p1"))["views"] == 1

    @pytest.mark.asyncio
    async def test_array_union_skips_existing(self, gateway):
        await gateway.set_document(POSTS, "p1", {"likes": ["u1"]})
        await gateway.update_document(POSTS, "p1", {"likes": ArrayUnion("u1", "u2")})
        assert (await gateway.get_document(POSTS, "p1"))["likes"] == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_array_remove(self, gateway):
        await gateway.set_document(POSTS, "p1", {"likes": ["u1", "u2"]})
        await gateway.update_document(POSTS, "p1", {"likes": ArrayRemove("u1", "u9")})
        assert (await gateway.get_document(POSTS, "p1"))["likes"] == ["u2"]


class TestQueries:
    @pytest.mark.asyncio
    async def test_filters(self, gateway):
        await seed_posts(gateway, 6)
        page = await gateway.query_documents(POSTS, filters=[Filter("category", FilterOp.EQ, "tech")])
        assert {d["id"] for d in page.documents} == {"p1", "p3", "p5"}

        page = await gateway.query_documents(
            POSTS, filters=[Filter("tags", FilterOp.ARRAY_CONTAINS, "python")]
        )
        assert {d["id"] for d in page.documents} == {"p0", "p3"}

        page = await gateway.query_documents(POSTS, filters=[Filter("id", FilterOp.IN, ["p2", "p4"])])
        assert {d["id"] for d in page.documents} == {"p2", "p4"}

    @pytest.mark.asyncio
    async def test_order_and_limit(self, gateway):
        await seed_posts(gateway, 5)
        page = await gateway.query_documents(POSTS, order=NEWEST_FIRST, limit=2)
        assert [d["id"] for d in page.documents] == ["p4", "p3"]

    @pytest.mark.asyncio
    async def test_cursor_pagination_covers_every_document_once(self, gateway):
        await seed_posts(gateway, 7)
        seen, cursor = [], None
        while True:
            page = await gateway.query_documents(POSTS, order=NEWEST_FIRST, limit=3, cursor=cursor)
            if not page.documents:
                break
            seen.extend(d["id"] for d in page.documents)
            cursor = page.cursor
        assert seen == [f"p{i}" for i in range(6, -1, -1)]

    @pytest.mark.asyncio
    async def test_cursor_resumes_after_deleted_document(self, gateway):
        await seed_posts(gateway, 5)
        page = await gateway.query_documents(POSTS, order=NEWEST_FIRST, limit=2)
        await gateway.delete_document(POSTS, "p3")
        rest = await gateway.query_documents(POSTS, order=NEWEST_FIRST, cursor=page.cursor)
        assert [d["id"] for d in rest.documents] == ["p2", "p1", "p0"]

    @pytest.mark.asyncio
    async def test_invalid_cursor(self, gateway):
        await seed_posts(gateway, 1)
        with pytest.raises(InvalidCursorError):
            await gateway.query_documents(POSTS, order=NEWEST_FIRST, cursor="%%%not-a-cursor")

    @pytest.mark.asyncio
    async def test_empty_page_has_no_cursor(self, gateway):
        page = await gateway.query_documents(POSTS)
        assert page.documents == []
        assert page.cursor is None

    @pytest.mark.asyncio
    async def test_count_with_filter(self, gateway):
        await seed_posts(gateway, 4)
        assert await gateway.count_documents(POSTS, [Filter("category", FilterOp.EQ, "life")]) == 2


class TestListeners:
    @pytest.mark.asyncio
    async def test_document_listener_receives_snapshots(self, gateway):
        snapshots = []
        unsubscribe = gateway.subscribe_to_document(USERS, "u1", snapshots.append)
        await gateway.set_document(USERS, "u1", {"full_name": "Ada"})
        await gateway.update_document(USERS, "u1", {"bio": "Hi"})
        await gateway.delete_document(USERS, "u1")
        unsubscribe()
        await gateway.set_document(USERS, "u1", {"full_name": "Again"})

        assert snapshots[0] is None
        assert snapshots[1]["full_name"] == "Ada"
        assert snapshots[2]["bio"] == "Hi"
        assert snapshots[3] is None
        assert len(snapshots) == 4

    def test_failing_listener_does_not_break_others(self, gateway):
        received = []

        def broken(snapshot):
            if snapshot is not None:
                raise ValueError("boom")

        gateway.subscribe_to_document(USERS, "u1", broken)
        gateway.subscribe_to_document(USERS, "u1", received.append)
        gateway.listeners.notify_document(USERS, "u1", {"id": "u1"})
        assert received[-1] == {"id": "u1"}

    def test_auth_listener(self, gateway):
        events = []
        unsubscribe = gateway.subscribe_to_auth_state(events.append)
        identity = Identity(id="u1", email="a@example.com")
        gateway.emit_auth_state(identity)
        gateway.emit_auth_state(None)
        unsubscribe()
        gateway.emit_auth_state(identity)
        assert events == [None, identity, None]

    @pytest.mark.asyncio
    async def test_sign_out_emits_none(self, gateway):
        events = []
        gateway.emit_auth_state(Identity(id="u1"))
        gateway.subscribe_to_auth_state(events.append)
        await gateway.sign_out()
        assert events[-1] is None


class TestStorage:
    @pytest.mark.asyncio
    async def test_upload_file(self, gateway):
        url = await gateway.upload_file(b"png", "blog-covers/1_a.png", "image/png")
        assert url.endswith("blog-covers/1_a.png")
        assert gateway.get_file("blog-covers/1_a.png") == b"png"
