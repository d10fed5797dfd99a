"""Unit tests for first sign-in profile provisioning."""

import uuid
from unittest.mock import patch

from authentication.auth import get_or_create_profile
from repositories.db_models import Profile
from repositories.profile_repository import ProfileRepository


class TestGetOrCreateProfile:
    """Tests for get_or_create_profile function."""

    def test_provisions_from_metadata(self, db_session):
        user_id = uuid.uuid4()
        profile = get_or_create_profile(
            db_session,
            {
                "sub": str(user_id),
                "email": "dev@example.com",
                "user_metadata": {"full_name": "Dev Person", "picture": "/a.png"},
            },
        )
        assert profile.id == user_id
        assert profile.name == "Dev Person"
        assert profile.avatar_url == "/a.png"

    def test_name_falls_back_to_email(self, db_session):
        profile = get_or_create_profile(
            db_session, {"sub": str(uuid.uuid4()), "email": "tester@example.com"}
        )
        assert profile.name == "tester"

    def test_existing_profile_returned(self, db_session, test_user):
        profile = get_or_create_profile(
            db_session, {"sub": str(test_user.id), "email": "other@example.com"}
        )
        assert profile.id == test_user.id
        assert profile.email == "test.user@example.com"

    def test_concurrent_first_sign_in(self, db_session, test_user):
        user_id = test_user.id
        # Forget the row so the insert reaches the primary key constraint
        db_session.expunge_all()

        original = ProfileRepository.get_by_id
        calls = []

        def miss_first_lookup(self, id):
            calls.append(id)
            return None if len(calls) == 1 else original(self, id)

        with patch.object(ProfileRepository, "get_by_id", miss_first_lookup):
            profile = get_or_create_profile(
                db_session, {"sub": str(user_id), "email": "test.user@example.com"}
            )

        assert profile.id == user_id
        assert profile.name == "Test User"
        assert db_session.query(Profile).count() == 1
