# tests/api/test_posts_list.py
"""Integration tests for GET /api/posts."""

import base64
from unittest.mock import patch

PUBLIC_CACHE = "public, s-maxage=60, stale-while-revalidate=300"


class TestListEnvelope:
    """Response shape and headers."""

    def test_anonymous_feed(self, client, make_post):
        older = make_post(title="older")
        newer = make_post(title="newer")

        response = client.get("/api/posts")

        assert response.status_code == 200
        assert response.headers["cache-control"] == PUBLIC_CACHE
        body = response.json()
        assert body["success"] is True
        assert [post["id"] for post in body["data"]] == [newer.id, older.id]
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 2, "totalPages": 1}
        assert body["meta"] == {"nextCursor": None, "hasMore": False, "paginationMode": "offset"}

    def test_item_fields(self, client, make_user, make_post):
        author = make_user(badge_type="expert_visa")
        make_post(author, content='<p><strong>Q:</strong></p><p>Body</p><img src="x.png">')

        [item] = client.get("/api/posts").json()["data"]

        assert item["author"]["badgeType"] == "expert_visa"
        assert item["author"]["isFollowing"] is False
        assert item["trustBadge"] == "expert"
        assert item["trustWeight"] == 1.3
        assert item["thumbnail"] == "x.png"
        assert item["thumbnails"] == ["x.png"]
        assert item["excerpt"] == "Body"
        assert item["isLiked"] is False
        assert item["certifiedResponderCount"] == 0
        assert item["createdAt"].endswith("Z")

    def test_content_is_truncated_unless_requested(self, client, make_post):
        make_post(content="a" * 5000)

        preview = client.get("/api/posts").json()["data"][0]
        full = client.get("/api/posts", params={"include": "author, content"}).json()["data"][0]

        assert len(preview["content"]) == 4000
        assert len(full["content"]) == 5000

    def test_signed_in_response_is_private(self, client, auth_headers, make_post):
        make_post()
        response = client.get("/api/posts", headers=auth_headers)
        assert response.headers["cache-control"] == "private, no-store"

    def test_search_and_filter_are_private(self, client, make_post):
        make_post(title="visa")
        assert client.get("/api/posts", params={"search": "visa"}).headers[
            "cache-control"
        ] == "private, no-store"
        assert client.get("/api/posts", params={"filter": "following"}).headers[
            "cache-control"
        ] == "private, no-store"

    def test_category_only_stays_public(self, client, make_post):
        make_post()
        response = client.get("/api/posts", params={"category": "visa"})
        assert response.headers["cache-control"] == PUBLIC_CACHE

    def test_bad_token_is_anonymous(self, client, make_post):
        make_post()
        response = client.get("/api/posts", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 200
        assert response.headers["cache-control"] == PUBLIC_CACHE


class TestListParameters:
    """Query parameter parsing."""

    def test_limit_is_clamped(self, client, make_post):
        for _ in range(3):
            make_post()

        assert client.get("/api/posts", params={"limit": "0"}).json()["pagination"]["limit"] == 1
        assert client.get("/api/posts", params={"limit": "500"}).json()["pagination"]["limit"] == 50
        assert client.get("/api/posts", params={"limit": "abc"}).json()["pagination"]["limit"] == 20

    def test_bad_page_is_first_page(self, client, make_post):
        make_post()
        body = client.get("/api/posts", params={"page": "-3"}).json()
        assert body["pagination"]["page"] == 1
        assert len(body["data"]) == 1

    def test_huge_page_is_empty_not_an_error(self, client, make_post):
        make_post()
        response = client.get("/api/posts", params={"page": str(10**20)})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == []
        assert body["meta"]["hasMore"] is False

    def test_deeply_nested_cursor_falls_back_to_offset(self, client, make_post):
        make_post()
        token = base64.urlsafe_b64encode(b"[" * 100_000).decode().rstrip("=")
        response = client.get("/api/posts", params={"cursor": token})
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1

    def test_unknown_type_and_filter_are_ignored(self, client, make_post):
        make_post(type="share")
        body = client.get("/api/posts", params={"type": "poll", "filter": "everything"}).json()
        assert len(body["data"]) == 1

    def test_parent_category_alias(self, client, make_post):
        match = make_post(category="students", subcategory="scholarship")
        make_post(category="career")
        body = client.get("/api/posts", params={"parentCategory": "students"}).json()
        assert [post["id"] for post in body["data"]] == [match.id]


class TestListPagination:
    """Cursor mode over HTTP."""

    def test_cursor_round_trip(self, client, make_post):
        posts = [make_post() for _ in range(3)]

        first = client.get("/api/posts", params={"limit": 2}).json()
        cursor = first["meta"]["nextCursor"]
        second = client.get("/api/posts", params={"limit": 2, "cursor": cursor}).json()

        assert [p["id"] for p in first["data"]] == [posts[2].id, posts[1].id]
        assert [p["id"] for p in second["data"]] == [posts[0].id]
        assert second["meta"] == {"nextCursor": None, "hasMore": False, "paginationMode": "cursor"}
        assert second["pagination"] == {"page": 1, "limit": 2, "total": 0, "totalPages": 0}
        assert "certifiedResponderCount" not in second["data"][0]
        assert "otherResponderCount" not in second["data"][0]


class TestListSearch:
    """Search over HTTP."""

    def test_fallback_meta(self, client, make_post):
        question = make_post(title="Housing deposit")
        make_post(type="share", title="Photo diary")

        body = client.get("/api/posts", params={"search": "xyz  abc"}).json()

        assert [post["id"] for post in body["data"]] == [question.id]
        assert body["meta"]["isFallback"] is True
        assert body["meta"]["reason"] == "no_matches"
        assert body["meta"]["query"] == "xyz  abc"
        assert body["meta"]["tokens"] == ["xyz", "abc"]
        assert body["pagination"]["total"] == 1

    def test_search_too_long(self, client):
        response = client.get("/api/posts", params={"search": "a" * 81})

        assert response.status_code == 400
        assert response.headers["cache-control"] == "no-store"
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "SEARCH_QUERY_TOO_LONG"

    def test_anonymous_following_is_empty(self, client, make_post):
        make_post()
        body = client.get("/api/posts", params={"filter": "following-users"}).json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 0


class TestListErrors:
    """Unexpected failures."""

    def test_server_error_envelope(self, client):
        with patch(
            "viet_kconnect.api.endpoints.posts.list_posts",
            side_effect=RuntimeError("database is gone"),
        ):
            response = client.get("/api/posts")

        assert response.status_code == 500
        assert response.headers["cache-control"] == "no-store"
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "code": "SERVER_ERROR",
        }
