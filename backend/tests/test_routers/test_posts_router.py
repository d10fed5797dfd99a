"""
Integration tests for the posts, comments and tags endpoints.
"""

import uuid

from repositories.db_models import ModerationStatus, Post


class TestFeed:
    def test_public_feed(self, client, test_post):
        response = client.get("/api/posts")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["pageSize"] == 10
        assert data["pageCount"] == 1
        post = data["posts"][0]
        assert post["id"] == str(test_post.id)
        assert post["author"]["name"] == "Test User"
        assert post["likesCount"] == 0

    def test_hidden_posts_are_excluded(self, client, test_user, post_factory):
        post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        response = client.get("/api/posts")
        assert response.json()["total"] == 0

    def test_invalid_sort(self, client):
        response = client.get("/api/posts", params={"sort": "random"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid payload"

    def test_page_must_be_positive(self, client):
        response = client.get("/api/posts", params={"page": 0})
        assert response.status_code == 400

    def test_empty_feed_has_one_page(self, client):
        data = client.get("/api/posts", params={"page": 3}).json()
        assert data["posts"] == []
        assert data["pageCount"] == 1


class TestCreatePost:
    def test_create(self, client, auth_headers, db_session):
        response = client.post(
            "/api/posts",
            json={
                "title": "Closed test for Habit Pal",
                "content": "Join the group, then opt in.",
                "googleGroupUrl": "https://groups.google.com/g/habit-pal",
                "tags": ["Productivity"],
                "images": ["https://cdn.example.com/shot.png"],
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["ok"] is True
        post = db_session.get(Post, uuid.UUID(body["postId"]))
        assert post.google_group_url == "https://groups.google.com/g/habit-pal"

    def test_requires_auth(self, client):
        response = client.post("/api/posts", json={"title": "t", "content": "c"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["type"] == "unauthorized"

    def test_cookie_session(self, client, test_user, headers_for):
        token = headers_for(test_user)["Authorization"].split(" ", 1)[1]
        client.cookies.set("sb-access-token", token)
        response = client.post(
            "/api/posts", json={"title": "Via cookie", "content": "Works too"}
        )
        assert response.status_code == 201

    def test_first_sign_in_creates_profile(self, client, db_session):
        from authentication.auth import create_access_token
        from repositories.db_models import Profile

        user_id = uuid.uuid4()
        token = create_access_token(
            user_id,
            claims={"email": "newdev@example.com", "user_metadata": {"full_name": "New Dev"}},
        )
        response = client.post(
            "/api/posts",
            json={"title": "Hello", "content": "First post"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 201
        assert db_session.get(Profile, user_id).name == "New Dev"

    def test_too_many_images(self, client, auth_headers):
        response = client.post(
            "/api/posts",
            json={
                "title": "Screens",
                "content": "Too many",
                "images": [f"https://cdn.example.com/{i}.png" for i in range(3)],
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_missing_title(self, client, auth_headers):
        response = client.post("/api/posts", json={"content": "c"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["details"][0]["loc"][-1] == "title"


class TestPostDetailAndMutations:
    def test_detail_for_signed_in_viewer(self, client, test_post, other_headers):
        client.post(f"/api/posts/{test_post.id}/like", headers=other_headers)

        data = client.get(f"/api/posts/{test_post.id}", headers=other_headers).json()

        assert data["likedByMe"] is True
        assert data["savedByMe"] is False
        assert data["likesCount"] == 1
        assert data["images"] == []

    def test_viewer_id_for_anonymous(self, client, test_post, other_user, other_headers):
        client.post(f"/api/posts/{test_post.id}/save", headers=other_headers)
        data = client.get(
            f"/api/posts/{test_post.id}", params={"viewerId": str(other_user.id)}
        ).json()
        assert data["savedByMe"] is True

    def test_missing_post(self, client):
        response = client.get(f"/api/posts/{uuid.uuid4()}")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Post not found"
        assert body["type"] == "not_found"
        assert body["correlation_id"]

    def test_author_updates(self, client, test_post, auth_headers, db_session):
        response = client.put(
            f"/api/posts/{test_post.id}",
            json={"title": "Updated title"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        db_session.refresh(test_post)
        assert test_post.title == "Updated title"

    def test_non_author_cannot_update(self, client, test_post, other_headers):
        response = client.put(
            f"/api/posts/{test_post.id}", json={"title": "Mine"}, headers=other_headers
        )
        assert response.status_code == 403
        assert response.json()["type"] == "forbidden"

    def test_author_deletes(self, client, test_post, auth_headers):
        assert client.delete(f"/api/posts/{test_post.id}", headers=auth_headers).json() == {
            "ok": True
        }
        assert client.get(f"/api/posts/{test_post.id}").status_code == 404

    def test_like_toggle(self, client, test_post, other_headers):
        first = client.post(f"/api/posts/{test_post.id}/like", headers=other_headers)
        second = client.post(f"/api/posts/{test_post.id}/like", headers=other_headers)
        assert first.json() == {"liked": True, "likesCount": 1}
        assert second.json() == {"liked": False, "likesCount": 0}

    def test_like_with_foreign_user_id(self, client, test_post, test_user, other_headers):
        response = client.post(
            f"/api/posts/{test_post.id}/like",
            json={"userId": str(test_user.id)},
            headers=other_headers,
        )
        assert response.status_code == 403


class TestComments:
    def test_create_and_list(self, client, test_post, other_headers):
        created = client.post(
            f"/api/posts/{test_post.id}/comments",
            json={"content": "Opted in!"},
            headers=other_headers,
        )
        assert created.status_code == 200
        assert created.json()["content"] == "Opted in!"

        listing = client.get(f"/api/posts/{test_post.id}/comments").json()
        assert listing["total"] == 1
        assert listing["items"][0]["author"]["name"] == "Other User"

    def test_edit_and_delete_own_comment(self, client, test_post, other_headers, auth_headers):
        comment_id = client.post(
            f"/api/posts/{test_post.id}/comments",
            json={"content": "v1"},
            headers=other_headers,
        ).json()["id"]
        url = f"/api/posts/{test_post.id}/comments/{comment_id}"

        assert client.patch(url, json={"content": "v2"}, headers=auth_headers).status_code == 403
        assert client.patch(url, json={"content": "v2"}, headers=other_headers).json()[
            "content"
        ] == "v2"
        assert client.delete(url, headers=other_headers).json() == {"ok": True}
        assert client.delete(url, headers=other_headers).status_code == 404

    def test_empty_comment(self, client, test_post, other_headers):
        response = client.post(
            f"/api/posts/{test_post.id}/comments",
            json={"content": "   "},
            headers=other_headers,
        )
        assert response.status_code == 400


class TestTags:
    def test_list_and_search(self, client, test_tag):
        data = client.get("/api/tags", params={"q": "prod"}).json()
        assert data["ok"] is True
        assert data["tags"] == [
            {"id": str(test_tag.id), "name": "Productivity", "slug": "productivity"}
        ]

    def test_limit_bounds(self, client):
        assert client.get("/api/tags", params={"limit": 201}).status_code == 400

    def test_get_or_create(self, client, auth_headers, test_tag):
        existing = client.post("/api/tags", json={"name": "productivity"}, headers=auth_headers)
        created = client.post("/api/tags", json={"name": "Arcade"}, headers=auth_headers)
        assert existing.json()["tag"]["id"] == str(test_tag.id)
        assert created.json()["tag"]["slug"] == "arcade"

    def test_create_requires_auth(self, client):
        assert client.post("/api/tags", json={"name": "Arcade"}).status_code == 401
