"""Tests for like and save toggles."""

import uuid

import pytest

from models.exceptions import ActorMismatchException, PostNotFoundException
from repositories.db_models import ModerationStatus
from services.reaction_service import ReactionService


class TestToggleLike:
    def test_like_then_unlike(self, db_session, test_post, other_user):
        first = ReactionService.toggle_like(db_session, test_post.id, other_user.id)
        assert first == {"liked": True, "likes_count": 1}

        second = ReactionService.toggle_like(db_session, test_post.id, other_user.id)
        assert second == {"liked": False, "likes_count": 0}

    def test_count_includes_other_users(
        self, db_session, test_post, test_user, other_user
    ):
        ReactionService.toggle_like(db_session, test_post.id, test_user.id)
        result = ReactionService.toggle_like(db_session, test_post.id, other_user.id)
        assert result["likes_count"] == 2

    def test_claimed_user_must_match_session(self, db_session, test_post, test_user, other_user):
        with pytest.raises(ActorMismatchException):
            ReactionService.toggle_like(
                db_session, test_post.id, test_user.id, claimed_user_id=other_user.id
            )

    def test_matching_claimed_user_is_fine(self, db_session, test_post, test_user):
        result = ReactionService.toggle_like(
            db_session, test_post.id, test_user.id, claimed_user_id=test_user.id
        )
        assert result["liked"] is True

    def test_missing_post(self, db_session, test_user):
        with pytest.raises(PostNotFoundException):
            ReactionService.toggle_like(db_session, uuid.uuid4(), test_user.id)

    def test_hidden_post(self, db_session, test_user, other_user, post_factory):
        post = post_factory(test_user, moderation_status=ModerationStatus.HIDDEN)
        with pytest.raises(PostNotFoundException):
            ReactionService.toggle_like(db_session, post.id, other_user.id)


class TestToggleSave:
    def test_save_then_unsave(self, db_session, test_post, other_user):
        assert ReactionService.toggle_save(db_session, test_post.id, other_user.id) == {
            "saved": True,
            "saves_count": 1,
        }
        assert ReactionService.toggle_save(db_session, test_post.id, other_user.id) == {
            "saved": False,
            "saves_count": 0,
        }

    def test_independent_from_likes(self, db_session, test_post, other_user):
        ReactionService.toggle_like(db_session, test_post.id, other_user.id)
        result = ReactionService.toggle_save(db_session, test_post.id, other_user.id)
        assert result["saves_count"] == 1

    def test_deleted_post(self, db_session, test_user, other_user, post_factory):
        post = post_factory(test_user, is_deleted=True)
        with pytest.raises(PostNotFoundException):
            ReactionService.toggle_save(db_session, post.id, other_user.id)
