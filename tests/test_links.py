"""Unit tests for the link store and the JSON link API.

Supabase is mocked with fluent table chains; no network access.
"""

from __future__ import annotations

import re
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.models.post import PostCreate
from app.services.links import (
    PostValidationError,
    StoreError,
    create_post_with_link,
    delete_post,
    generate_short_code,
    get_link,
    get_link_with_post,
    list_links,
    validate_post,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

POST_ID = str(uuid4())
LINK_UUID = str(uuid4())
CREATED_AT = "2026-01-01T12:00:00+00:00"


def _chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in ("select", "insert", "delete", "eq", "limit", "order"):
        getattr(m, method).return_value = m
    return m


def _post_row(**fields) -> dict:
    row = {
        "id": POST_ID,
        "title": None,
        "description": None,
        "embed_code": None,
        "media_url": None,
        "media_type": None,
        "thumbnail_url": None,
        "redirect_link": None,
        "popunder_ad": None,
        "created_at": CREATED_AT,
    }
    row.update(fields)
    return row


def _link_row(**fields) -> dict:
    row = {
        "id": LINK_UUID,
        "post_id": POST_ID,
        "link_id": "abc123",
        "title": "Hello",
        "created_at": CREATED_AT,
    }
    row.update(fields)
    return row


def _tables(mock_supabase: MagicMock, **tables: MagicMock) -> None:
    mock_supabase.table.side_effect = lambda name: tables[name]


# ---------------------------------------------------------------------------
# Validation and short codes
# ---------------------------------------------------------------------------


class TestValidatePost:
    def test_requires_title_or_description(self) -> None:
        with pytest.raises(PostValidationError, match="Either Title or Description is required."):
            validate_post(PostCreate(redirect_link="https://example.com"))

    def test_requires_redirect_or_popunder(self) -> None:
        with pytest.raises(PostValidationError, match="Redirect Link or Popunder Ad"):
            validate_post(PostCreate(title="Hi"))

    def test_whitespace_only_counts_as_missing(self) -> None:
        with pytest.raises(PostValidationError):
            validate_post(PostCreate(title="   ", description="\n", redirect_link="https://e.com"))

    @pytest.mark.parametrize(
        "fields",
        [
            {"title": "Hi", "redirect_link": "https://example.com"},
            {"description": "Body", "popunder_ad": "<script>x()</script>"},
        ],
    )
    def test_valid_payloads(self, fields: dict) -> None:
        validate_post(PostCreate(**fields))

    def test_invalid_payload_writes_nothing(self, mock_supabase: MagicMock) -> None:
        with pytest.raises(PostValidationError):
            create_post_with_link(PostCreate(title="Hi"))
        mock_supabase.table.assert_not_called()


class TestShortCode:
    def test_format(self) -> None:
        for _ in range(50):
            assert re.fullmatch(r"[0-9a-z]{6}", generate_short_code())


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreatePostWithLink:
    def test_inserts_post_then_link(self, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.return_value = MagicMock(
            data=[_post_row(title="Hello", redirect_link="https://example.com")]
        )
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row()])
        _tables(mock_supabase, posts=posts, generated_links=links)

        post, link = create_post_with_link(
            PostCreate(title="  Hello ", redirect_link="https://example.com")
        )

        post_payload = posts.insert.call_args[0][0]
        assert post_payload["title"] == "Hello"
        assert post_payload["description"] is None
        link_payload = links.insert.call_args[0][0]
        assert link_payload["post_id"] == POST_ID
        assert link_payload["title"] == "Hello"
        assert re.fullmatch(r"[0-9a-z]{6}", link_payload["link_id"])
        assert str(post.id) == POST_ID
        assert link.link_id == "abc123"

    @pytest.mark.parametrize(
        ("fields", "expected_title"),
        [
            ({"description": "Only body", "popunder_ad": "x"}, "Only body"),
            ({"title": "T", "description": "D", "popunder_ad": "x"}, "T"),
        ],
    )
    def test_link_title_falls_back(
        self, mock_supabase: MagicMock, fields: dict, expected_title: str
    ) -> None:
        posts = _chainable_table_mock()
        posts.execute.return_value = MagicMock(data=[_post_row(**fields)])
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row(title=expected_title)])
        _tables(mock_supabase, posts=posts, generated_links=links)

        create_post_with_link(PostCreate(**fields))

        assert links.insert.call_args[0][0]["title"] == expected_title

    def test_post_insert_failure(self, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.side_effect = Exception("relation \"posts\" does not exist")
        _tables(mock_supabase, posts=posts)

        with pytest.raises(StoreError, match="Failed to create post: relation"):
            create_post_with_link(PostCreate(title="Hi", redirect_link="https://e.com"))

    def test_link_insert_failure_keeps_post(self, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.return_value = MagicMock(data=[_post_row(title="Hi")])
        links = _chainable_table_mock()
        links.execute.side_effect = Exception("duplicate key value")
        _tables(mock_supabase, posts=posts, generated_links=links)

        with pytest.raises(StoreError, match="Failed to create link: duplicate key value"):
            create_post_with_link(PostCreate(title="Hi", redirect_link="https://e.com"))
        posts.delete.assert_not_called()

    def test_store_message_attribute_is_preferred(self, mock_supabase: MagicMock) -> None:
        error = Exception("{'message': 'raw'}")
        error.message = "permission denied"
        posts = _chainable_table_mock()
        posts.execute.side_effect = error
        _tables(mock_supabase, posts=posts)

        with pytest.raises(StoreError, match="permission denied"):
            create_post_with_link(PostCreate(title="Hi", redirect_link="https://e.com"))


# ---------------------------------------------------------------------------
# Read and delete
# ---------------------------------------------------------------------------


class TestListLinks:
    def test_newest_first(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row(), _link_row(link_id="zzz999")])
        _tables(mock_supabase, generated_links=links)

        result = list_links(10)

        assert [link.link_id for link in result] == ["abc123", "zzz999"]
        links.order.assert_called_once_with("created_at", desc=True)
        links.limit.assert_called_once_with(10)

    def test_limit_is_capped(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[])
        _tables(mock_supabase, generated_links=links)

        assert list_links(1000) == []
        links.limit.assert_called_once_with(100)

    def test_failure(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.side_effect = Exception("boom")
        _tables(mock_supabase, generated_links=links)

        with pytest.raises(StoreError, match="Failed to load links: boom"):
            list_links()


class TestGetLinkWithPost:
    def test_found(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(
            data=[_link_row(posts=_post_row(title="Hello", redirect_link="https://e.com"))]
        )
        _tables(mock_supabase, generated_links=links)

        result = get_link_with_post("abc123")

        assert result is not None
        assert result.post.title == "Hello"
        assert result.link.link_id == "abc123"
        links.select.assert_called_once_with("*, posts(*)")
        links.eq.assert_called_once_with("link_id", "abc123")

    def test_post_as_list(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row(posts=[_post_row(title="L")])])
        _tables(mock_supabase, generated_links=links)

        assert get_link_with_post("abc123").post.title == "L"

    def test_unknown_code(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[])
        _tables(mock_supabase, generated_links=links)

        assert get_link_with_post("nope00") is None

    def test_link_without_post(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row(posts=None)])
        _tables(mock_supabase, generated_links=links)

        assert get_link_with_post("abc123") is None

    def test_failure(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.side_effect = Exception("timeout")
        _tables(mock_supabase, generated_links=links)

        with pytest.raises(StoreError):
            get_link_with_post("abc123")


class TestGetLinkAndDelete:
    def test_get_link(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row()])
        _tables(mock_supabase, generated_links=links)

        link = get_link(LINK_UUID)

        assert link is not None and str(link.id) == LINK_UUID
        links.eq.assert_called_once_with("id", LINK_UUID)

    def test_get_link_missing(self, mock_supabase: MagicMock) -> None:
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[])
        _tables(mock_supabase, generated_links=links)

        assert get_link(uuid4()) is None

    def test_delete_post(self, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        _tables(mock_supabase, posts=posts)

        delete_post(POST_ID)

        posts.delete.assert_called_once_with()
        posts.eq.assert_called_once_with("id", POST_ID)
        posts.execute.assert_called_once()

    def test_delete_failure(self, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.side_effect = Exception("nope")
        _tables(mock_supabase, posts=posts)

        with pytest.raises(StoreError, match="Failed to delete post: nope"):
            delete_post(POST_ID)


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------


class TestLinksApi:
    """Endpoints under /api/v1 require an admin session."""

    def test_requires_session(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/links")
        assert response.status_code == 401
        assert response.json()["detail"] == "Admin session required"

    @patch("app.routers.links.list_links")
    def test_list(self, mock_list: MagicMock, admin_client: TestClient) -> None:
        mock_list.return_value = []
        response = admin_client.get("/api/v1/links?limit=5")
        assert response.status_code == 200
        assert response.json() == []
        mock_list.assert_called_once_with(5)

    def test_list_rejects_large_limit(self, admin_client: TestClient) -> None:
        assert admin_client.get("/api/v1/links?limit=500").status_code == 422

    def test_create(self, admin_client: TestClient, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.return_value = MagicMock(
            data=[_post_row(title="Hello", redirect_link="https://example.com")]
        )
        links = _chainable_table_mock()
        links.execute.return_value = MagicMock(data=[_link_row()])
        _tables(mock_supabase, posts=posts, generated_links=links)

        response = admin_client.post(
            "/api/v1/links",
            json={"title": "Hello", "redirect_link": "https://example.com"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["url"] == "http://links.example.com/post/abc123"
        assert body["link"]["link_id"] == "abc123"
        assert body["post"]["title"] == "Hello"

    def test_create_invalid(self, admin_client: TestClient, mock_supabase: MagicMock) -> None:
        response = admin_client.post("/api/v1/links", json={"title": "Hello"})
        assert response.status_code == 422
        assert "Redirect Link or Popunder Ad" in response.json()["detail"]
        mock_supabase.table.assert_not_called()

    def test_create_store_failure(self, admin_client: TestClient, mock_supabase: MagicMock) -> None:
        posts = _chainable_table_mock()
        posts.execute.side_effect = Exception("down")
        _tables(mock_supabase, posts=posts)

        response = admin_client.post(
            "/api/v1/links", json={"title": "Hello", "popunder_ad": "<script>x()</script>"}
        )
        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to create post: down"

    @patch("app.routers.links.get_link", return_value=None)
    def test_read_missing(self, _mock: MagicMock, admin_client: TestClient) -> None:
        response = admin_client.get(f"/api/v1/links/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Link not found"

    @patch("app.routers.links.delete_post")
    def test_delete(self, mock_delete: MagicMock, admin_client: TestClient) -> None:
        response = admin_client.delete(f"/api/v1/posts/{POST_ID}")
        assert response.status_code == 204
        assert str(mock_delete.call_args[0][0]) == POST_ID

    def test_thumbnail_upload_must_be_image(self, admin_client: TestClient) -> None:
        response = admin_client.post(
            "/api/v1/uploads?purpose=thumbnail",
            files={"file": ("clip.mp4", b"\x00\x01", "video/mp4")},
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Please select an image file for thumbnail."
