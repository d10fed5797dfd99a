"""
Tests for PostRepository queries and shared repository helpers.
"""

import uuid

import pytest

from repositories.base import like_pattern, parse_uuid
from repositories.db_models import (
    Comment,
    ModerationStatus,
    PostLike,
    PostSave,
    PostTag,
)
from repositories.post_repository import PostRepository


class TestHelpers:
    def test_parse_uuid(self):
        value = uuid.uuid4()
        assert parse_uuid(f" {value} ") == value

    @pytest.mark.parametrize("raw", [None, "", "abc", "1234"])
    def test_parse_uuid_rejects_text(self, raw):
        assert parse_uuid(raw) is None

    def test_like_pattern(self):
        assert like_pattern("  Arcade ") == "%arcade%"


class TestVisibility:
    def test_get_visible(self, db_session, test_user, test_post, post_factory):
        repo = PostRepository(db_session)
        hidden = post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        deleted = post_factory(test_user, is_deleted=True)

        assert repo.get_visible(test_post.id) is not None
        assert repo.get_visible(hidden.id) is None
        assert repo.get_visible(deleted.id) is None
        assert repo.get_not_deleted(hidden.id) is not None
        assert repo.get_not_deleted(deleted.id) is None
        assert repo.get_with_author(deleted.id) is not None


class TestCounts:
    def test_batch_counts(self, db_session, test_user, other_user, test_post):
        db_session.add_all(
            [
                PostLike(post_id=test_post.id, user_id=other_user.id),
                PostLike(post_id=test_post.id, user_id=test_user.id),
                PostSave(post_id=test_post.id, user_id=other_user.id),
                Comment(post_id=test_post.id, author_id=other_user.id, content="a"),
                Comment(
                    post_id=test_post.id,
                    author_id=other_user.id,
                    content="b",
                    is_deleted=True,
                ),
            ]
        )
        db_session.commit()
        repo = PostRepository(db_session)
        ids = [test_post.id]

        assert repo.get_like_counts(ids) == {test_post.id: 2}
        assert repo.get_save_counts(ids) == {test_post.id: 1}
        assert repo.get_comment_counts(ids) == {test_post.id: 1}
        assert repo.get_report_counts(ids) == {}

    def test_empty_id_list(self, db_session):
        assert PostRepository(db_session).get_like_counts([]) == {}


class TestReplaceTags:
    def test_replaces_whole_set(self, db_session, test_post, test_tag):
        from repositories.db_models import Tag

        games = Tag(name="Games", slug="games")
        db_session.add(games)
        db_session.commit()
        repo = PostRepository(db_session)

        repo.replace_tags(test_post.id, [test_tag.id])
        repo.commit()
        repo.replace_tags(test_post.id, [games.id])
        repo.commit()

        links = db_session.query(PostTag).filter(PostTag.post_id == test_post.id).all()
        assert [link.tag_id for link in links] == [games.id]
        assert [t.slug for t in repo.get_tags_for_posts([test_post.id])[test_post.id]] == [
            "games"
        ]
