"""
Unit tests for TagService.
"""

import uuid

import pytest

from models.exceptions import (
    DuplicateSlugException,
    NothingToUpdateException,
    TagInUseException,
    TagNotFoundException,
    ValidationException,
)
from repositories.db_models import PostTag, Tag
from services.tag_service import TagService


def _link(db_session, post, tag) -> None:
    db_session.add(PostTag(post_id=post.id, tag_id=tag.id))
    db_session.commit()


class TestCreateTag:
    def test_derives_slug_from_name(self, db_session):
        tag = TagService.create_tag(db_session, "  Closed Testing ")
        assert tag.name == "Closed Testing"
        assert tag.slug == "closed-testing"

    def test_explicit_slug_is_normalized(self, db_session):
        tag = TagService.create_tag(db_session, "Games", slug="  Mobile GAMES!! ")
        assert tag.slug == "mobile-games"

    def test_blank_slug_falls_back_to_name(self, db_session):
        tag = TagService.create_tag(db_session, "Utilities", slug="   ")
        assert tag.slug == "utilities"

    def test_duplicate_slug_conflicts(self, db_session, test_tag):
        with pytest.raises(DuplicateSlugException):
            TagService.create_tag(db_session, "PRODUCTIVITY")

    def test_name_required(self, db_session):
        with pytest.raises(ValidationException):
            TagService.create_tag(db_session, "   ")

    def test_name_too_long(self, db_session):
        with pytest.raises(ValidationException):
            TagService.create_tag(db_session, "x" * 49)

    def test_name_without_slug_characters_rejected(self, db_session):
        with pytest.raises(ValidationException, match="Invalid slug"):
            TagService.create_tag(db_session, "!!!")


class TestUpdateTag:
    def test_rename_keeps_slug(self, db_session, test_tag):
        tag = TagService.update_tag(db_session, test_tag.id, name="Focus")
        assert tag.name == "Focus"
        assert tag.slug == "productivity"

    def test_blank_slug_rederived_from_new_name(self, db_session, test_tag):
        tag = TagService.update_tag(db_session, test_tag.id, name="Deep Work", slug="")
        assert tag.slug == "deep-work"

    def test_same_slug_on_same_tag_is_allowed(self, db_session, test_tag):
        tag = TagService.update_tag(db_session, test_tag.id, slug="Productivity")
        assert tag.slug == "productivity"

    def test_slug_of_another_tag_conflicts(self, db_session, test_tag):
        other = TagService.create_tag(db_session, "Finance")
        with pytest.raises(DuplicateSlugException):
            TagService.update_tag(db_session, other.id, slug="productivity")

    def test_nothing_to_update(self, db_session, test_tag):
        with pytest.raises(NothingToUpdateException):
            TagService.update_tag(db_session, test_tag.id)

    def test_missing_tag(self, db_session):
        with pytest.raises(TagNotFoundException):
            TagService.update_tag(db_session, uuid.uuid4(), name="Ghost")


class TestDeleteTag:
    def test_deletes_unused_tag(self, db_session, test_tag):
        TagService.delete_tag(db_session, test_tag.id)
        assert db_session.get(Tag, test_tag.id) is None

    def test_blocked_while_linked(self, db_session, test_tag, test_post):
        _link(db_session, test_post, test_tag)
        with pytest.raises(TagInUseException) as exc_info:
            TagService.delete_tag(db_session, test_tag.id)
        assert exc_info.value.message == (
            "Tag is used by 1 post(s). Remove it from posts first."
        )
        assert db_session.get(Tag, test_tag.id) is not None

    def test_links_of_soft_deleted_posts_still_block(
        self, db_session, test_tag, test_user, post_factory
    ):
        deleted = post_factory(test_user, is_deleted=True)
        _link(db_session, deleted, test_tag)
        with pytest.raises(TagInUseException):
            TagService.delete_tag(db_session, test_tag.id)

    def test_missing_tag(self, db_session):
        with pytest.raises(TagNotFoundException):
            TagService.delete_tag(db_session, uuid.uuid4())


class TestGetOrCreate:
    def test_reuses_tag_matching_slug(self, db_session, test_tag):
        tag = TagService.get_or_create_tag(db_session, " productivity ")
        assert tag.id == test_tag.id
        assert db_session.query(Tag).count() == 1

    def test_creates_missing_tag(self, db_session):
        tag = TagService.get_or_create_tag(db_session, "Health & Fitness")
        assert tag.slug == "health-fitness"

    def test_resolve_for_post_dedupes_by_slug(self, db_session, test_tag):
        tags = TagService.resolve_tags_for_post(
            db_session, ["Productivity", "productivity!", "", "Notes"]
        )
        assert [t.slug for t in tags] == ["productivity", "notes"]
        assert tags[0].id == test_tag.id


class TestListAdminTags:
    def test_counts_only_live_posts(
        self, db_session, test_tag, test_user, test_post, post_factory
    ):
        _link(db_session, test_post, test_tag)
        _link(db_session, post_factory(test_user, is_deleted=True), test_tag)
        TagService.create_tag(db_session, "Arcade")

        result = TagService.list_admin_tags(db_session, None, page=1, limit=10)

        assert result["total"] == 2
        assert [t["slug"] for t in result["items"]] == ["arcade", "productivity"]
        counts = {t["slug"]: t["posts_count"] for t in result["items"]}
        assert counts == {"arcade": 0, "productivity": 1}
        assert result["has_more"] is False

    def test_query_filters_by_name(self, db_session, test_tag):
        TagService.create_tag(db_session, "Arcade")
        result = TagService.list_admin_tags(db_session, "arc", page=1, limit=10)
        assert [t["name"] for t in result["items"]] == ["Arcade"]
