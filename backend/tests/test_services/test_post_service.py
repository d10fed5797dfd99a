"""
Unit tests for PostService.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

import models.schemas as schemas
from models.exceptions import (
    NotOwnerException,
    PostNotFoundException,
    ValidationException,
)
from repositories.db_models import ModerationStatus, Post, PostLike, PostSave
from services.post_service import PostService
from services.reaction_service import ReactionService


def _create(db_session, author, **overrides):
    payload = {
        "title": "Closed test for Habit Pal",
        "content": "Need 12 testers for 14 days.",
        "playStoreUrl": "https://play.google.com/store/apps/details?id=habit.pal",
        "tags": ["Productivity", "Habits"],
    }
    payload.update(overrides)
    return PostService.create_post(db_session, author.id, schemas.PostCreate(**payload))


class TestCreatePost:
    def test_creates_tags_and_images(self, db_session, test_user):
        post = _create(
            db_session,
            test_user,
            images=["https://cdn.example.com/1.png", "https://cdn.example.com/1.png"],
        )
        assert post.author_id == test_user.id
        assert sorted(tag.slug for tag in post.tags) == ["habits", "productivity"]
        assert [image.url for image in post.images] == ["https://cdn.example.com/1.png"]

    def test_reuses_existing_tag(self, db_session, test_user, test_tag):
        post = _create(db_session, test_user, tags=["productivity"])
        assert [tag.id for tag in post.tags] == [test_tag.id]

    def test_sanitizes_fields(self, db_session, test_user):
        post = _create(
            db_session,
            test_user,
            title="<b>Beta</b> & friends",
            googleGroupUrl="javascript:alert(1)",
        )
        assert post.title == "Beta & friends"
        assert post.google_group_url is None

    def test_title_of_only_markup_rejected(self, db_session, test_user):
        with pytest.raises(ValidationException, match="Title is required"):
            _create(db_session, test_user, title="<img src=x>")

    def test_non_http_image_rejected(self, db_session, test_user):
        with pytest.raises(ValidationException):
            _create(db_session, test_user, images=["ftp://files/1.png"])
        assert db_session.query(Post).count() == 0


class TestFeed:
    def test_excludes_hidden_and_deleted(self, db_session, test_post, test_user, post_factory):
        post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        post_factory(test_user, is_deleted=True)

        feed = PostService.get_feed(db_session)

        assert feed["ok"] is True
        assert feed["total"] == 1
        assert feed["page_count"] == 1
        assert [p["id"] for p in feed["posts"]] == [test_post.id]

    def test_newest_first(self, db_session, test_user, post_factory):
        older = post_factory(test_user, title="Older")
        newer = post_factory(test_user, title="Newer")
        older.created_at = datetime.now(timezone.utc) - timedelta(days=1)
        db_session.commit()

        feed = PostService.get_feed(db_session)
        assert [p["id"] for p in feed["posts"]] == [newer.id, older.id]

    def test_sort_by_likes(self, db_session, test_user, other_user, post_factory):
        quiet = post_factory(test_user, title="Quiet")
        popular = post_factory(test_user, title="Popular")
        popular.created_at = datetime.now(timezone.utc) - timedelta(days=1)
        db_session.add(PostLike(post_id=popular.id, user_id=other_user.id))
        db_session.commit()

        feed = PostService.get_feed(db_session, sort=schemas.FeedSort.MOST_LIKED)

        assert [p["id"] for p in feed["posts"]] == [popular.id, quiet.id]
        assert feed["posts"][0]["likes_count"] == 1

    def test_sort_by_saves(self, db_session, test_user, other_user, post_factory):
        post_factory(test_user, title="Plain")
        saved = post_factory(test_user, title="Saved")
        saved.created_at = datetime.now(timezone.utc) - timedelta(days=1)
        db_session.add(PostSave(post_id=saved.id, user_id=other_user.id))
        db_session.commit()

        feed = PostService.get_feed(db_session, sort=schemas.FeedSort.MOST_SAVED)
        assert feed["posts"][0]["id"] == saved.id

    def test_tag_filter_by_slug_or_name(self, db_session, test_user, test_post):
        tagged = _create(db_session, test_user, tags=["Health & Fitness"])

        by_slug = PostService.get_feed(db_session, tag="health-fitness")
        by_name = PostService.get_feed(db_session, tag="health & fitness")

        assert [p["id"] for p in by_slug["posts"]] == [tagged.id]
        assert [p["id"] for p in by_name["posts"]] == [tagged.id]

    def test_verified_only(self, db_session, test_post, profile_factory, post_factory):
        dev = profile_factory("Verified Dev", is_verified=True)
        trusted = post_factory(dev)
        feed = PostService.get_feed(db_session, verified_only=True)
        assert [p["id"] for p in feed["posts"]] == [trusted.id]

    def test_search(self, db_session, test_user, post_factory):
        post_factory(test_user, title="Retro arcade shooter")
        post_factory(test_user, title="Budget planner")
        feed = PostService.get_feed(db_session, search="ARCADE")
        assert feed["total"] == 1

    def test_pages_of_ten(self, db_session, test_user, post_factory):
        for i in range(12):
            post_factory(test_user, title=f"App {i}")
        first = PostService.get_feed(db_session, page=1)
        second = PostService.get_feed(db_session, page=2)
        assert first["page_size"] == 10
        assert first["page_count"] == 2
        assert len(first["posts"]) == 10
        assert len(second["posts"]) == 2


class TestPostDetail:
    def test_viewer_flags(self, db_session, test_post, other_user):
        ReactionService.toggle_save(db_session, test_post.id, other_user.id)
        detail = PostService.get_post_detail(db_session, test_post.id, other_user.id)
        assert detail["liked_by_me"] is False
        assert detail["saved_by_me"] is True
        assert detail["saves_count"] == 1

    def test_anonymous_has_no_flags(self, db_session, test_post):
        detail = PostService.get_post_detail(db_session, test_post.id)
        assert "liked_by_me" not in detail

    def test_hidden_post_not_found(self, db_session, test_user, post_factory):
        post = post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        with pytest.raises(PostNotFoundException):
            PostService.get_post_detail(db_session, post.id)


class TestUpdatePost:
    def test_partial_update_keeps_other_fields(self, db_session, test_user):
        post = _create(db_session, test_user)
        updated = PostService.update_post(
            db_session, post.id, test_user.id, schemas.PostUpdate(title="Renamed")
        )
        assert updated.title == "Renamed"
        assert updated.content == "Need 12 testers for 14 days."
        assert len(updated.tags) == 2

    def test_replaces_tags_and_images(self, db_session, test_user):
        post = _create(db_session, test_user, images=["https://cdn.example.com/a.png"])
        updated = PostService.update_post(
            db_session,
            post.id,
            test_user.id,
            schemas.PostUpdate(tags=["Games"], images=[]),
        )
        assert [tag.slug for tag in updated.tags] == ["games"]
        assert updated.images == []

    def test_explicit_null_clears_url(self, db_session, test_user):
        post = _create(db_session, test_user)
        updated = PostService.update_post(
            db_session, post.id, test_user.id, schemas.PostUpdate(playStoreUrl=None)
        )
        assert updated.play_store_url is None

    def test_hidden_post_still_editable_by_author(self, db_session, test_user, post_factory):
        post = post_factory(test_user, moderation_status=ModerationStatus.NEEDS_FIX)
        updated = PostService.update_post(
            db_session, post.id, test_user.id, schemas.PostUpdate(content="Fixed link")
        )
        assert updated.content == "Fixed link"

    def test_not_owner(self, db_session, test_post, other_user):
        with pytest.raises(NotOwnerException):
            PostService.update_post(
                db_session, test_post.id, other_user.id, schemas.PostUpdate(title="Mine")
            )

    def test_deleted_post(self, db_session, test_user, post_factory):
        post = post_factory(test_user, is_deleted=True)
        with pytest.raises(PostNotFoundException):
            PostService.update_post(
                db_session, post.id, test_user.id, schemas.PostUpdate(title="Back")
            )


class TestDeleteOwnPost:
    def test_soft_deletes(self, db_session, test_post, test_user):
        PostService.delete_own_post(db_session, test_post.id, test_user.id)
        db_session.refresh(test_post)
        assert test_post.is_deleted is True
        assert test_post.deleted_by_id == test_user.id

    def test_not_owner(self, db_session, test_post, other_user):
        with pytest.raises(NotOwnerException):
            PostService.delete_own_post(db_session, test_post.id, other_user.id)

    def test_missing(self, db_session, test_user):
        with pytest.raises(PostNotFoundException):
            PostService.delete_own_post(db_session, uuid.uuid4(), test_user.id)


class TestAuthorListings:
    def test_own_listing_includes_hidden(self, db_session, test_post, test_user, post_factory):
        post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        post_factory(test_user, is_deleted=True)

        public = PostService.list_author_posts(db_session, test_user.id, 1, 20)
        own = PostService.list_author_posts(
            db_session, test_user.id, 1, 20, include_hidden=True
        )
        assert public["total"] == 1
        assert own["total"] == 2

    def test_liked_and_saved(self, db_session, test_post, other_user):
        ReactionService.toggle_like(db_session, test_post.id, other_user.id)
        liked = PostService.list_liked_posts(db_session, other_user.id, 1, 20)
        saved = PostService.list_saved_posts(db_session, other_user.id, 1, 20)
        assert [p["id"] for p in liked["items"]] == [test_post.id]
        assert saved["total"] == 0
